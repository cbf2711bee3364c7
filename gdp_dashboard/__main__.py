"""
Print the GDP ranking and summary to the terminal.

Usage:
    python -m gdp_dashboard
    python -m gdp_dashboard --year 2024 --metric gdpPerCapita
    python -m gdp_dashboard --search kingdom
"""
import argparse
import sys

from . import config
from .models import Metric
from .services import statistics
from .services.loader import load_sync
from .services.summarizer import format_growth, format_number, generate_summary


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="GDP ranking from the country pages")
    parser.add_argument("--year", default=None, help=f"{config.YEAR_MIN}-{config.YEAR_MAX}, default latest")
    parser.add_argument("--metric", default=None, choices=[m.value for m in Metric])
    parser.add_argument("--search", default=None, help="Filter by current or historical name")
    parser.add_argument("--ids", default=None, help="Comma-separated country ids")
    args = parser.parse_args(argv)

    config.configure_logging()

    ids = args.ids.split(",") if args.ids else config.COUNTRY_IDS
    dataset = load_sync(ids)
    if not dataset:
        print("No data available.")
        return 1

    year = statistics.resolve_year(args.year)
    metric = statistics.resolve_metric(args.metric)

    if args.search is not None:
        records = statistics.search(dataset, args.search)
        if not records:
            print(f"No countries match '{args.search}'.")
        for r in records:
            print(f"{r.name:20s} {' -> '.join(r.historical_names)}")
        return 0

    print(f"{metric.label} - {year}")
    print("-" * 56)
    for i, r in enumerate(statistics.rank(dataset, year, metric), start=1):
        value = r.yearly_metrics[year].value(metric)
        growth = format_growth(statistics.growth_rate(r, year))
        flag = " *" if r.synthetic else ""
        print(f"{i:2d}. {r.name:20s} {format_number(value):>14s}  {growth:>7s}{flag}")
    print()
    print(generate_summary(statistics.aggregate(dataset, year), sum(r.synthetic for r in dataset.values())))
    return 0


if __name__ == "__main__":
    sys.exit(main())
