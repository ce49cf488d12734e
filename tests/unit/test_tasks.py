"""
Unit tests for the Celery report tasks.
Tasks are called synchronously; their sessions come from the test engine.
"""

import json

import pytest

from delivery_analytics.core.exceptions import ReportNotFoundError
from task_queue.tasks.reports import run_all_reports, run_report


class TestReportTasks:

    def test_run_report_returns_serializable_result(self, loaded_store):
        result = run_report("city_revenue_ranking", {"year": 2024})

        assert result["key"] == "city_revenue_ranking"
        assert result["parameters"] == {"year": 2024}
        assert result["rows"][0] == {"city": "Mumbai", "total_revenue": 850.0, "city_rank": 1}
        json.dumps(result)

    def test_run_report_eager_apply(self, loaded_store):
        async_result = run_report.apply(args=("customer_churn",))

        assert async_result.successful()
        assert async_result.get()["row_count"] == 1

    def test_run_report_unknown_key_raises(self, loaded_store):
        with pytest.raises(ReportNotFoundError):
            run_report("nope")

    def test_run_all_reports(self, loaded_store):
        results = run_all_reports()

        assert len(results) == 17
        assert results[0]["key"] == "top_dishes_by_customer"
        json.dumps(results)
