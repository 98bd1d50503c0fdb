"""
Unit tests for selection transitions: toggling labels and replacing the compound subset.
Run: python tests/test_selection.py
"""

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
	sys.path.insert(0, str(ROOT))

from curator.models import SelectionState
from curator.tagging import TagInferenceEngine, is_compound, select_combos, toggle_tag
from fakes import candidate


def assert_equal(actual, expected, msg):
	if actual != expected:
		raise AssertionError(f"{msg} | expected={expected}, actual={actual}")


def assert_true(cond, msg):
	if not cond:
		raise AssertionError(msg)


def assert_combos_subset(state):
	compound = tuple(t for t in state.selected_tags if is_compound(t))
	assert_equal(tuple(sorted(state.selected_combos)), tuple(sorted(compound)), "combos mirror compound tags")


def test_toggle_adds_and_removes():
	state = SelectionState()
	state = toggle_tag(state, "Action")
	state = toggle_tag(state, "Comedy")
	assert_equal(state.selected_tags, ("Action", "Comedy"), "insertion order")
	state = toggle_tag(state, "Action")
	assert_equal(state.selected_tags, ("Comedy",), "second toggle removes")
	assert_equal(state.selected_combos, (), "no combos")


def test_toggle_compound_mirrors_combos():
	state = SelectionState(selected_tags=("Thriller", "Suspense"))
	state = toggle_tag(state, "Edge of Seat")
	assert_equal(state.selected_combos, ("Edge of Seat",), "compound recorded")
	assert_combos_subset(state)
	state = toggle_tag(state, "Edge of Seat")
	assert_equal(state.selected_tags, ("Thriller", "Suspense"), "prerequisites kept")
	assert_equal(state.selected_combos, (), "compound removed")


def test_removing_prerequisite_keeps_selected_combo():
	state = SelectionState(selected_tags=("Thriller", "Suspense", "Edge of Seat"), selected_combos=("Edge of Seat",))
	state = toggle_tag(state, "Suspense")
	assert_equal(state.selected_tags, ("Thriller", "Edge of Seat"), "combo stays selected")
	engine = TagInferenceEngine()
	tags = engine.infer_tags(candidate(1, "Heat", genre_ids=[80]), state, 2024)
	assert_true(not any(t.is_compound for t in tags), "but is no longer suggested")


def test_select_combos_replaces_subset():
	state = SelectionState(selected_tags=("Action", "Comedy", "Dark Comedy"), selected_combos=("Dark Comedy",))
	state = select_combos(state, ["Action Comedy", "Heart Racing"])
	assert_equal(state.selected_tags, ("Action", "Comedy", "Action Comedy", "Heart Racing"), "plain labels then combos")
	assert_equal(state.selected_combos, ("Action Comedy", "Heart Racing"), "new subset")
	assert_combos_subset(state)


def test_select_combos_clear_and_dedupe():
	state = SelectionState(selected_tags=("Drama", "Soul Stirring"), selected_combos=("Soul Stirring",))
	cleared = select_combos(state, [])
	assert_equal(cleared, SelectionState(selected_tags=("Drama",)), "empty choice clears combos")
	twice = select_combos(state, ["Soul Stirring", "Soul Stirring"])
	assert_equal(twice.selected_tags, ("Drama", "Soul Stirring"), "duplicates collapse")


def test_transitions_do_not_mutate():
	state = SelectionState(selected_tags=("Action",))
	toggle_tag(state, "Comedy")
	select_combos(state, ["Heart Racing"])
	assert_equal(state.selected_tags, ("Action",), "original untouched")


def test_selection_drives_suggestion_cycle():
	engine = TagInferenceEngine()
	item = candidate(1, "Heat", genre_ids=[80])
	state = SelectionState()
	for label in ("Thriller", "Suspense"):
		state = toggle_tag(state, label)
	tags = engine.infer_tags(item, state, 2024)
	assert_true("Edge of Seat" in [t.label for t in tags if t.is_compound], "suggested after both")
	state = toggle_tag(state, "Suspense")
	tags = engine.infer_tags(item, state, 2024)
	assert_true("Edge of Seat" not in [t.label for t in tags], "gone after deselect")
	assert_equal([t.label for t in tags if t.selected], ["Thriller"], "selected flags follow state")


def main():
	print("Running selection tests...")
	test_toggle_adds_and_removes()
	test_toggle_compound_mirrors_combos()
	test_removing_prerequisite_keeps_selected_combo()
	test_select_combos_replaces_subset()
	test_select_combos_clear_and_dedupe()
	test_transitions_do_not_mutate()
	test_selection_drives_suggestion_cycle()
	print("All selection tests passed!")


if __name__ == '__main__':
	main()
