from musynth.jobqueue import NUM_SLOTS, JobQueue, JobType


def _recorder():
    log = []
    handlers = {t: (lambda v, t=t: log.append((t, v))) for t in JobType}
    return log, handlers


def test_add_now_is_pending():
    queue = JobQueue()
    queue.add(3, JobType.LOW, 0)
    assert queue.pending(JobType.LOW) == [3]
    assert queue.pending(JobType.ZERO) == []


def test_newest_runs_first_and_order_of_types():
    queue = JobQueue()
    queue.add(1, JobType.ZERO, 0)
    queue.add(2, JobType.LOW, 0)
    queue.add(3, JobType.LOW, 0)
    queue.add(4, JobType.EVENT, 0)
    log, handlers = _recorder()
    queue.handle(handlers)
    assert log == [(JobType.LOW, 3), (JobType.LOW, 2), (JobType.EVENT, 4),
                   (JobType.ZERO, 1)]
    assert queue.index == 1


def test_delay_runs_in_later_slot():
    queue = JobQueue()
    queue.add(5, JobType.LOW, 0xF00)
    log, handlers = _recorder()
    for _ in range(15):
        queue.handle(handlers)
    assert log == []
    assert queue.pending(JobType.LOW) == [5]
    queue.handle(handlers)
    assert log == [(JobType.LOW, 5)]


def test_low_job_moves_but_event_stays():
    queue = JobQueue()
    queue.add(1, JobType.LOW, 0x500)
    queue.add(1, JobType.LOW, 0)
    queue.add(2, JobType.EVENT, 0)
    queue.add(2, JobType.EVENT, 0x500)
    assert queue.pending(JobType.LOW) == [1]
    assert queue.pending(JobType.EVENT) == [2]
    log, handlers = _recorder()
    for _ in range(NUM_SLOTS):
        queue.handle(handlers)
    assert log.count((JobType.LOW, 1)) == 1
    assert log.count((JobType.EVENT, 2)) == 1


def test_same_slot_is_not_duplicated():
    queue = JobQueue()
    queue.add(7, JobType.ZERO, 0)
    queue.add(7, JobType.ZERO, 0)
    assert queue.pending(JobType.ZERO) == [7]


def test_blocked_voice_is_dropped():
    queue = JobQueue()
    queue.add(1, JobType.LOW, 0)
    queue.add(2, JobType.LOW, 0)
    log, handlers = _recorder()
    queue.handle(handlers, is_blocked=lambda v: v == 1)
    assert log == [(JobType.LOW, 2)]
    queue.add(1, JobType.LOW, 0)
    assert queue.pending(JobType.LOW) == [1]


def test_index_wraps_around():
    queue = JobQueue()
    for _ in range(NUM_SLOTS):
        queue.handle({})
    assert queue.index == 0
    queue.add(9, JobType.EVENT, 0)
    assert queue.pending(JobType.EVENT) == [9]


def test_handler_may_requeue_voice():
    queue = JobQueue()
    log = []

    def low(voice):
        log.append(voice)
        queue.add(voice, JobType.LOW, 0x100)

    queue.add(4, JobType.LOW, 0)
    queue.handle({JobType.LOW: low})
    assert log == [4]
    assert queue.pending(JobType.LOW) == [4]
    queue.handle({JobType.LOW: low})
    assert log == [4, 4]