"""
Score and group a saved batch of search results.

This script:
1) Loads search candidates from a JSONL dump (default: data/sample_search.jsonl)
2) Scores them against a query
3) Groups them into franchises and standalone results
4) Logs the result set, and optionally the tag suggestions of the top result

Usage:
    python -m scripts.group_results --query matrix
    python -m scripts.group_results --query matrix --year 2024 --tags
"""

import argparse  # command line options
from datetime import date  # default reference year
from pathlib import Path  # filesystem-safe paths

from loguru import logger  # console logging

from curator.data_loader import CandidateLoader  # data ingestion
from curator.franchise import FranchiseGrouper  # scoring + grouping
from curator.tagging import TagInferenceEngine  # tag suggestions


def parse_args(argv=None):
	root = Path(__file__).resolve().parents[1]  # project root
	parser = argparse.ArgumentParser(description="Score and group saved search results")
	parser.add_argument("--input", default=str(root / 'data' / 'sample_search.jsonl'), help="JSONL file of search results")
	parser.add_argument("--query", default="", help="query the results were fetched for")
	parser.add_argument("--year", type=int, default=date.today().year, help="reference year for recency")
	parser.add_argument("--tags", action="store_true", help="also print tag suggestions for the best result")
	return parser.parse_args(argv)


def main(argv=None):
	args = parse_args(argv)

	logger.info("=" * 60)
	logger.info(f"Group results for '{args.query}' (year {args.year})")
	logger.info("=" * 60)

	# 1) Load data
	candidates = CandidateLoader().load_candidates_from_jsonl(args.input)

	# 2-3) Score and group
	result = FranchiseGrouper().group(candidates, args.query, args.year)

	# 4) Report
	for name, group in result.franchise_groups.items():
		logger.info(f"[Franchise] {name} ({len(group.members)})")
		for m in group.members:
			logger.info(f"    {m.relevance_score:7.3f}  {m.title}")
	logger.info(f"[Standalone] ({len(result.standalone)})")
	for s in result.standalone:
		logger.info(f"    {s.relevance_score:7.3f}  {s.title}")

	if args.tags:
		ranked = [m for g in result.franchise_groups.values() for m in g.members] + result.standalone
		if ranked:
			best = max(ranked, key=lambda s: s.relevance_score)
			tags = TagInferenceEngine().infer_tags(best.candidate, [], args.year)
			logger.info(f"[Tags] {best.title}: " + ", ".join(f"{t.label} ({t.category})" for t in tags))

	logger.info("=" * 60)
	return result


if __name__ == '__main__':
	main()  # invoke grouping
