"""
Streamlit dashboard for curating the movie catalog.
Calls the FastAPI server (default http://localhost:8000) to search TMDB, suggest tags,
and read/write the catalog table.

Run API:   uvicorn api:app --reload
Run UI:    streamlit run streamlit_app.py
"""

# HTTP client to call the API
import requests  # make web requests to the FastAPI server
# Streamlit framework to build a simple interactive UI
import streamlit as st  # UI primitives
# Typing to make function signatures clearer
from typing import Optional  # indicates values can be None

# Shared pieces from the curator package
from curator.config import get_settings  # default API URL, page size
from curator.data_loader import CandidateLoader  # dict -> SearchCandidate
from curator.search_session import RecentSelections  # recent searches list
from curator.tag_rules import CATEGORIES, COMPOUND_LABELS  # catalog categories, combo labels

SETTINGS = get_settings()  # environment settings
POSTER_BASE = f"{SETTINGS.tmdb_image_base_url}/w154"  # small poster size
LOADER = CandidateLoader()  # payload normalization

# Configure Streamlit page (title and layout width)
st.set_page_config(page_title="Movie Catalog Curator", layout="wide")  # wide layout
st.title("🎬 Movie Catalog Curator")  # friendly header

# Per-session state: the selected movie, the tag selection, the row being edited
DEFAULTS = {
	"movie": None,  # selected search result (dict)
	"selection": {"selected_tags": [], "selected_combos": []},  # tag selection
	"editing_id": None,  # catalog row id when editing
	"m3u8_link": "",  # streaming link input
	"asset_id": "",  # optional asset id input
	"category": "",  # category input
	"page": 0,  # catalog table page
	"recent": [],  # recent selections
	"pending": None,  # form change applied before widgets render
}
for key, value in DEFAULTS.items():
	st.session_state.setdefault(key, value)


def api_call(method: str, path: str, **kwargs) -> Optional[dict]:
	"""Call the API; show the server's short error message on failure and return None."""
	try:
		resp = requests.request(method, f"{api_url}{path}", timeout=30, **kwargs)
	except requests.RequestException:
		st.error("The curator API is unreachable.")  # network errors
		return None
	if not resp.ok:
		try:
			detail = resp.json().get("detail")
		except ValueError:
			detail = None
		st.error(detail if isinstance(detail, str) else f"Request failed ({resp.status_code})")
		return None
	return resp.json()


def apply_pending():
	"""Apply a queued form reset or edit; widget-backed keys can only change before the widgets render."""
	pending = st.session_state.pending
	if pending is None:
		return
	st.session_state.pending = None
	row = pending.get("row") or {}
	tags = row.get("custom_tags") or []
	st.session_state.editing_id = row.get("id")
	st.session_state.movie = {
		"id": row.get("tmdb_id"),
		"title": row.get("title") or "",
		"overview": row.get("overview") or "",
		"poster_path": row.get("poster_path"),
		"release_date": row.get("release_date"),
		"vote_average": row.get("rating") or 0,
	} if row else None
	st.session_state.m3u8_link = row.get("m3u8_link") or ""
	st.session_state.asset_id = row.get("asset_id") or ""
	st.session_state.category = row.get("category") or ""
	st.session_state.selection = {
		"selected_tags": tags,
		"selected_combos": [t for t in tags if t in COMPOUND_LABELS],
	}


def queue_form(row: Optional[dict] = None):
	"""Queue a form reset (row=None) or the edit of a catalog row, then rerun."""
	st.session_state.pending = {"row": row}
	st.rerun()


apply_pending()


def select_movie(movie: dict):
	st.session_state.movie = movie
	recent = RecentSelections(limit=SETTINGS.recent_selections_limit, items=st.session_state.recent)
	st.session_state.recent = recent.remember(LOADER.parse_candidate(movie))


def render_result(item: dict, key_prefix: str):
	movie = item["movie"]
	c1, c2 = st.columns([1, 5])  # small image column + large text column
	with c1:
		if movie.get("poster_path"):
			st.image(f"{POSTER_BASE}{movie['poster_path']}", width=80)  # poster
	with c2:
		year = (movie.get("release_date") or "")[:4] or "n/a"
		st.write(f"**{movie['title']}** ({year}) · ⭐ {movie.get('vote_average', 0):.1f}")
		st.caption(f"Score: {item['score']:.3f}")
		if st.button("Select", key=f"{key_prefix}-{movie['id']}"):
			select_movie(movie)
			st.rerun()


# Sidebar contains configuration controls and recent selections
with st.sidebar:
	st.header("Settings")  # section label
	api_url = st.text_input("API URL", SETTINGS.api_url)  # where the API lives
	rows_per_page = st.selectbox("Rows per page", [5, 10, 25], index=1)  # catalog page size
	st.markdown("---")
	st.subheader("Recent")
	for entry in st.session_state.recent:
		st.caption(entry["title"])

# Search box; each submitted query is grouped server-side
query = st.text_input("Search TMDB", placeholder="e.g., matrix")
if query.strip():
	payload = api_call("GET", "/search", params={"q": query})
	if payload is not None:
		st.caption(f"{payload.get('total_results', 0)} results in {payload.get('elapsed_ms', 0)} ms")
		for franchise in payload.get("franchises", []):
			with st.expander(f"{franchise['name']} ({len(franchise['members'])})"):
				for item in franchise["members"]:
					render_result(item, f"f-{franchise['name']}")
		for item in payload.get("standalone", []):
			render_result(item, "s")

st.divider()

# Movie form: tags, category, streaming link, asset id
movie = st.session_state.movie
if movie is not None:
	st.subheader("Edit Movie" if st.session_state.editing_id else "Add New Movie")
	c1, c2 = st.columns([1, 3])
	with c1:
		if movie.get("poster_path"):
			st.image(f"{POSTER_BASE}{movie['poster_path']}")
	with c2:
		st.write(movie.get("overview") or "")

		selection = st.session_state.selection
		tag_payload = api_call("POST", "/tags", json={"item": movie, "selected_tags": selection["selected_tags"]})
		if tag_payload is not None:
			combo_labels = [c["label"] for c in tag_payload["combos"]]
			chosen = st.multiselect(
				"Select Genre Combinations",
				combo_labels,
				default=[c for c in selection["selected_combos"] if c in combo_labels],
				format_func=lambda label: f"{label} ({', '.join(next(c['requires'] for c in tag_payload['combos'] if c['label'] == label))})",
			)
			if chosen != selection["selected_combos"]:
				new_selection = api_call("POST", "/tags/combos", json={**selection, "combos": chosen})
				if new_selection is not None:
					st.session_state.selection = new_selection
					st.rerun()

			st.write("Suggested Tags")
			cols = st.columns(4)
			for i, tag in enumerate(tag_payload["tags"]):
				label = f"{'✅ ' if tag['selected'] else ''}{tag['label']}"
				if cols[i % 4].button(label, key=f"tag-{i}-{tag['label']}", help=f"Source: {tag['source']}"):
					new_selection = api_call("POST", "/tags/toggle", json={**selection, "label": tag["label"]})
					if new_selection is not None:
						st.session_state.selection = new_selection
						st.rerun()

		st.text_input("Asset ID", key="asset_id")
		st.selectbox("Category", [""] + list(CATEGORIES), key="category", format_func=lambda c: c or "Select Category")
		st.text_input("M3U8 Link", key="m3u8_link")

		b1, b2 = st.columns(2)
		with b1:
			if st.button("Update Movie" if st.session_state.editing_id else "Save Movie", type="primary"):
				body = {
					"movie": movie,
					"m3u8_link": st.session_state.m3u8_link,
					"asset_id": st.session_state.asset_id,
					"category": st.session_state.category or None,
					"custom_tags": st.session_state.selection["selected_tags"],
				}
				if st.session_state.editing_id:
					saved = api_call("PUT", f"/movies/{st.session_state.editing_id}", json=body)
				else:
					saved = api_call("POST", "/movies", json=body)
				if saved is not None:
					queue_form()
		with b2:
			if st.session_state.editing_id and st.button("Cancel Edit"):
				queue_form()

st.divider()

# Catalog table with pagination, edit and delete
st.subheader("Catalog")
catalog = api_call("GET", "/movies", params={"page": st.session_state.page, "rows_per_page": rows_per_page})
if catalog is not None:
	for row in catalog["movies"]:
		c1, c2, c3, c4 = st.columns([1, 4, 1, 1])
		with c1:
			if row.get("poster_path"):
				st.image(f"{POSTER_BASE}{row['poster_path']}", width=60)
		with c2:
			st.write(f"**{row.get('title')}** · {row.get('category')} · ⭐ {row.get('rating')}")
			st.caption(", ".join(row.get("custom_tags") or []))
		with c3:
			if st.button("Edit", key=f"edit-{row['id']}"):
				queue_form(row)
		with c4:
			if st.button("Delete", key=f"delete-{row['id']}"):
				if api_call("DELETE", f"/movies/{row['id']}") is not None:
					st.rerun()

	total = catalog["total_count"]
	last_page = max(0, (total - 1) // rows_per_page)
	p1, p2, p3 = st.columns([1, 2, 1])
	with p1:
		if st.button("◀ Prev", disabled=st.session_state.page <= 0):
			st.session_state.page -= 1
			st.rerun()
	with p2:
		st.caption(f"Page {st.session_state.page + 1} of {last_page + 1} · {total} movies")
	with p3:
		if st.button("Next ▶", disabled=st.session_state.page >= last_page):
			st.session_state.page += 1
			st.rerun()
