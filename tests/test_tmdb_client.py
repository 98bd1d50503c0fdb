"""
Unit tests for TMDBClient using an httpx mock transport (no network).
Run: python tests/test_tmdb_client.py
"""

import asyncio
import sys
from pathlib import Path

import httpx

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
	sys.path.insert(0, str(ROOT))

from curator.errors import ProviderError, SEARCH_FAILED_MESSAGE
from curator.tmdb_client import TMDBClient


def assert_equal(actual, expected, msg):
	if actual != expected:
		raise AssertionError(f"{msg} | expected={expected}, actual={actual}")


def assert_true(cond, msg):
	if not cond:
		raise AssertionError(msg)


SEARCH_PAYLOAD = {
	"page": 1,
	"total_pages": 3,
	"total_results": 42,
	"results": [
		{"id": 603, "title": "The Matrix", "release_date": "1999-03-31", "popularity": 85.2, "vote_average": 8.2, "vote_count": 26000, "genre_ids": [28, 878]},
		{"title": "no id"},
		{"id": 604, "title": "The Matrix Reloaded", "release_date": "2003-05-15"},
	],
}


def make_client(handler):
	return TMDBClient("secret", base_url="https://tmdb.test/3/", transport=httpx.MockTransport(handler))


def test_search_movies():
	seen = []

	def handler(request):
		seen.append(request)
		return httpx.Response(200, json=SEARCH_PAYLOAD)

	async def run():
		client = make_client(handler)
		try:
			return await client.search_movies("matrix", page=1)
		finally:
			await client.aclose()

	page = asyncio.run(run())
	assert_equal([c.id for c in page.results], [603, 604], "malformed result skipped")
	assert_equal((page.page, page.total_pages, page.total_results), (1, 3, 42), "paging fields")
	req = seen[0]
	assert_equal(req.url.path, "/3/search/movie", "search path")
	assert_equal(req.url.params["query"], "matrix", "query param")
	assert_equal(req.url.params["api_key"], "secret", "api key param")
	assert_equal(req.url.params["include_adult"], "false", "adult results excluded")


def test_fetch_movie_details():
	def handler(request):
		if request.url.path.endswith("/credits"):
			return httpx.Response(200, json={
				"cast": [{"name": "Al Pacino", "character": "Vincent Hanna"}, "junk"],
				"crew": [{"name": "Michael Mann", "job": "Director"}],
			})
		return httpx.Response(200, json={"id": 949, "runtime": 170, "vote_average": 8.3})

	async def run():
		client = make_client(handler)
		try:
			return await client.fetch_movie_details(949)
		finally:
			await client.aclose()

	details = asyncio.run(run())
	assert_equal((details.tmdb_id, details.runtime, details.vote_average), (949, 170, 8.3), "detail fields")
	assert_equal(len(details.cast), 1, "non-object cast entries dropped")
	assert_equal(details.crew[0]["job"], "Director", "crew kept")


def test_missing_detail_fields():
	def handler(request):
		if request.url.path.endswith("/credits"):
			return httpx.Response(200, json={})
		return httpx.Response(200, json={"runtime": None})

	async def run():
		client = make_client(handler)
		try:
			return await client.fetch_movie_details(1)
		finally:
			await client.aclose()

	details = asyncio.run(run())
	assert_equal((details.runtime, details.vote_average, details.cast, details.crew), (None, None, [], []), "neutral defaults")


def run_failing(handler):
	async def run():
		client = make_client(handler)
		try:
			await client.search_movies("matrix")
		finally:
			await client.aclose()

	try:
		asyncio.run(run())
	except ProviderError as e:
		return e
	raise AssertionError("expected ProviderError")


def test_errors_become_provider_errors():
	err = run_failing(lambda request: httpx.Response(401, json={"status_message": "Invalid API key"}))
	assert_true("401" in str(err), "status kept in the internal message")
	assert_equal(err.user_message, SEARCH_FAILED_MESSAGE, "short user message")

	def boom(request):
		raise httpx.ConnectError("connection refused", request=request)

	assert_true(isinstance(run_failing(boom), ProviderError), "transport failure")
	assert_true(isinstance(run_failing(lambda request: httpx.Response(200, text="<html>")), ProviderError), "invalid JSON")


def main():
	print("Running TMDBClient tests...")
	test_search_movies()
	test_fetch_movie_details()
	test_missing_detail_fields()
	test_errors_become_provider_errors()
	print("All TMDBClient tests passed!")


if __name__ == '__main__':
	main()
