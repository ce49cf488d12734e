#!/usr/bin/env python3
"""
Script to load delivery data and print analytics reports.

Examples:
    python scripts/run_reports.py --load ./data --all
    python scripts/run_reports.py --report top_dishes_by_customer --param customer_name="Priya Sharma"
"""
import sys

from delivery_analytics.cli import main

if __name__ == "__main__":
    sys.exit(main())
