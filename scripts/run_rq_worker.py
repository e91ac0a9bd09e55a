"""Run an RQ worker inside the Flask app context.

Usage:
  export REDIS_URL=redis://localhost:6379/0
  export SOCKETIO_MESSAGE_QUEUE=$REDIS_URL   # lets poll jobs reach browser clients
  python scripts/run_rq_worker.py

The worker polls MAIE for submitted tasks (maie_bridge.jobs.poll) so the
app and its extensions must be initialized in the worker process.
"""

import os
import sys

# Ensure project root is on sys.path when running from scripts/ or other cwd
ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

import redis
from rq import Queue, Worker

from maie_bridge import create_app


def main():
    app = create_app()
    redis_url = app.config.get('REDIS_URL') or os.environ.get('REDIS_URL', 'redis://localhost:6379/0')
    conn = redis.from_url(redis_url)
    with app.app_context():
        q = Queue('default', connection=conn)
        worker = Worker([q], connection=conn)
        app.logger.info('RQ worker starting (pid %s)', os.getpid())
        try:
            # the scheduler is needed for the delayed re-polls
            worker.work(burst=False, with_scheduler=True)
        finally:
            app.logger.info('RQ worker exiting (pid %s)', os.getpid())


if __name__ == '__main__':
    main()
