"""
Celery configuration settings
"""
from delivery_analytics.core.config import CELERY_BROKER_URL, CELERY_RESULT_BACKEND

broker_url = CELERY_BROKER_URL
result_backend = CELERY_RESULT_BACKEND

# Report results are plain dicts and lists
task_serializer = 'json'
accept_content = ['json']
result_serializer = 'json'
timezone = 'UTC'
enable_utc = True

worker_concurrency = 4
worker_max_tasks_per_child = 100

task_routes = {
    'task_queue.tasks.reports.*': {'queue': 'reports'},
}

beat_schedule = {
    'nightly-all-reports': {
        'task': 'task_queue.tasks.reports.run_all_reports',
        'schedule': 3600.0 * 24,
        'args': (),
    },
}

task_track_started = True
worker_send_task_events = True

task_time_limit = 3600
task_soft_time_limit = 3000

result_expires = 60 * 60 * 24 * 7
