"""
Celery application for the delivery analytics task queue
"""

from celery import Celery

app = Celery('delivery_analytics_tasks')

app.config_from_object('task_queue.config.celeryconfig')

app.autodiscover_tasks(['task_queue.tasks'], related_name='reports')

if __name__ == '__main__':
    app.start()
