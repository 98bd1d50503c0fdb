"""
Unit tests for franchise keys and FranchiseGrouper partitioning.
Run: python tests/test_franchise.py
"""

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
	sys.path.insert(0, str(ROOT))

from curator.data_loader import CandidateLoader
from curator.franchise import FranchiseGrouper, franchise_key
from fakes import candidate


def assert_equal(actual, expected, msg):
	if actual != expected:
		raise AssertionError(f"{msg} | expected={expected}, actual={actual}")


def assert_true(cond, msg):
	if not cond:
		raise AssertionError(msg)


def assert_partition(result, items):
	ids = result.all_ids()
	assert_equal(sorted(ids), sorted(c.id for c in items), "every input id exactly once")
	assert_equal(len(ids), len(set(ids)), "no duplicates")
	for group in result.franchise_groups.values():
		assert_true(len(group.members) >= 2, f"group '{group.name}' has at least 2 members")
	for seq in [g.members for g in result.franchise_groups.values()] + [result.standalone]:
		scores = [s.relevance_score for s in seq]
		assert_equal(scores, sorted(scores, reverse=True), "scores non-increasing")


def test_franchise_key():
	assert_equal(franchise_key("Matrix Reloaded"), "Matrix", "space terminator")
	assert_equal(franchise_key("Alien: Covenant"), "Alien", "colon terminator")
	assert_equal(franchise_key("Alien 3"), "Alien", "sequel number after space")
	assert_equal(franchise_key("Rocky2"), "Rocky", "trailing sequel digits")
	assert_equal(franchise_key("Star Wars - Episode I"), "Star", "space hyphen")
	assert_equal(franchise_key("Spider-Man: No Way Home"), "Spider-Man", "hyphenated name kept")
	assert_equal(franchise_key("Inception"), "Inception", "no terminator -> whole title")
	assert_equal(franchise_key("Se7en"), "Se7en", "digit inside a word does not cut")
	assert_equal(franchise_key("7even"), "", "leading digit -> empty key")
	assert_equal(franchise_key("2001: A Space Odyssey"), "", "leading year -> empty key")
	assert_equal(franchise_key(""), "", "empty title")


def test_matrix_example():
	items = [
		candidate(1, "Matrix"),
		candidate(2, "Matrix Reloaded"),
		candidate(3, "Matrix Revolutions"),
		candidate(4, "Inception"),
	]
	result = FranchiseGrouper().group(items, "matrix", 2024)
	assert_equal(list(result.franchise_groups), ["Matrix"], "one franchise group")
	assert_equal(len(result.franchise_groups["Matrix"].members), 3, "three members")
	assert_equal([s.title for s in result.standalone], ["Inception"], "standalone")
	assert_partition(result, items)


def test_grouping_is_batch_relative():
	alone = FranchiseGrouper().group([candidate(1, "Matrix Reloaded"), candidate(2, "Inception")], "matrix", 2024)
	assert_equal(alone.franchise_groups, {}, "no sibling -> no group")
	assert_equal(len(alone.standalone), 2, "both standalone")


def test_members_sorted_by_score():
	items = [
		candidate(1, "Alien", popularity=10.0),
		candidate(2, "Alien: Covenant", popularity=90.0),
		candidate(3, "Alien 3", popularity=50.0),
	]
	result = FranchiseGrouper().group(items, "alien", 2024)
	assert_equal([m.id for m in result.franchise_groups["Alien"].members], [2, 3, 1], "descending by score")


def test_equal_scores_keep_input_order():
	items = [
		candidate(5, "Alien"),
		candidate(3, "Alien: Covenant"),
		candidate(9, "Alien 3"),
		candidate(7, "Heat"),
		candidate(1, "Ronin"),
	]
	result = FranchiseGrouper().group(items, "zzz", 2024)
	assert_equal([m.id for m in result.franchise_groups["Alien"].members], [5, 3, 9], "stable group order")
	assert_equal([s.id for s in result.standalone], [7, 1], "stable standalone order")


def test_groups_keep_first_seen_order():
	items = [
		candidate(1, "Toy Story"),
		candidate(2, "Alien"),
		candidate(3, "Alien: Covenant"),
		candidate(4, "Toy Story 2"),
	]
	result = FranchiseGrouper().group(items, "", 2024)
	assert_equal(list(result.franchise_groups), ["Toy", "Alien"], "first-seen franchise order")


def test_empty_keys_never_group():
	items = [candidate(1, "7even"), candidate(2, "300"), candidate(3, "2001: A Space Odyssey")]
	result = FranchiseGrouper().group(items, "", 2024)
	assert_equal(result.franchise_groups, {}, "empty keys stay standalone")
	assert_partition(result, items)


def test_embedded_digit_policy():
	items = [candidate(1, "Se7en"), candidate(2, "Serenity")]
	result = FranchiseGrouper().group(items, "", 2024)
	assert_equal(result.franchise_groups, {}, "Se7en does not pull in Serenity")


def test_empty_and_single_input():
	empty = FranchiseGrouper().group([], "matrix", 2024)
	assert_equal((empty.franchise_groups, empty.standalone), ({}, []), "empty input")
	single = FranchiseGrouper().group([candidate(1, "Matrix")], "matrix", 2024)
	assert_equal(single.franchise_groups, {}, "single input has no group")
	assert_equal([s.id for s in single.standalone], [1], "single input standalone")


def test_sample_dump_partition():
	items = CandidateLoader().load_candidates_from_jsonl(str(ROOT / 'data' / 'sample_search.jsonl'))
	result = FranchiseGrouper().group(items, "matrix", 2024)
	assert_partition(result, items)
	assert_equal(len(result.franchise_groups["The"].members), 4, "article prefix groups the Matrix films")


def test_input_not_mutated():
	items = [candidate(1, "Matrix"), candidate(2, "Matrix Reloaded")]
	FranchiseGrouper().group(items, "matrix", 2024)
	assert_true(not hasattr(items[0], "relevance_score"), "candidates are not decorated in place")


def main():
	print("Running FranchiseGrouper tests...")
	test_franchise_key()
	test_matrix_example()
	test_grouping_is_batch_relative()
	test_members_sorted_by_score()
	test_equal_scores_keep_input_order()
	test_groups_keep_first_seen_order()
	test_empty_keys_never_group()
	test_embedded_digit_policy()
	test_empty_and_single_input()
	test_sample_dump_partition()
	test_input_not_mutated()
	print("All FranchiseGrouper tests passed!")


if __name__ == '__main__':
	main()
