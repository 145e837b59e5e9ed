# gradebook/workers/worker_main.py
import logging

from rq import Queue, SimpleWorker

from gradebook.core.config import settings
from gradebook.workers.queue import get_redis_connection


def main():
    logging.basicConfig(level=settings.LOG_LEVEL)
    redis_conn = get_redis_connection()

    queues = [Queue(settings.RECALCULATION_QUEUE, connection=redis_conn)]

    worker = SimpleWorker(queues, connection=redis_conn)

    worker.work()


if __name__ == "__main__":
    main()
