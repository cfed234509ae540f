"""
Foundry — Background Jobs
==========================

What:  Producer and consumer sides of the SAQ job queue (Redis transport).

    queue.py     shared Queue instance, enqueue() / queue_info() helpers (producer)
    tasks.py     task functions executed by the worker (consumer)
    settings.py  SAQ worker settings and the run_worker() entry point

Controllers only ever call queue.enqueue(); the worker process
(`foundry worker`) imports tasks through settings.py.
"""
