import threading
import time
import unittest

from fakes import make_page
from notionvault.scheduler import JobScheduler, RenderJob, failures


def job(name, fn):
    return RenderJob(page=make_page(name, name), path=f"{name}.md", run=fn)


class JobSchedulerTest(unittest.TestCase):
    def test_failures_are_collected_and_others_complete(self):
        done = []
        lock = threading.Lock()

        def ok(name):
            def _run():
                with lock:
                    done.append(name)

            return _run

        def boom():
            raise RuntimeError("boom")

        jobs = [job("a", ok("a")), job("b", boom), job("c", ok("c"))]
        outcomes = JobScheduler(2, show_progress=False).run(jobs)

        self.assertEqual(len(outcomes), 3)
        self.assertEqual(sorted(done), ["a", "c"])
        failed = failures(outcomes)
        self.assertEqual(len(failed), 1)
        self.assertEqual(failed[0].job.path, "b.md")
        self.assertIsInstance(failed[0].error, RuntimeError)

    def test_no_jobs(self):
        self.assertEqual(JobScheduler(show_progress=False).run([]), [])

    def test_concurrency_is_bounded(self):
        active = 0
        peak = 0
        lock = threading.Lock()

        def work():
            nonlocal active, peak
            with lock:
                active += 1
                peak = max(peak, active)
            time.sleep(0.02)
            with lock:
                active -= 1

        jobs = [job(str(i), work) for i in range(12)]
        outcomes = JobScheduler(3, show_progress=False).run(jobs)

        self.assertEqual(len(outcomes), 12)
        self.assertTrue(all(o.ok for o in outcomes))
        self.assertLessEqual(peak, 3)
        self.assertGreaterEqual(peak, 1)

    def test_single_worker_runs_in_order(self):
        order = []
        jobs = [job(str(i), lambda i=i: order.append(i)) for i in range(5)]
        JobScheduler(1, show_progress=False).run(jobs)
        self.assertEqual(order, [0, 1, 2, 3, 4])

    def test_invalid_worker_count(self):
        with self.assertRaises(ValueError):
            JobScheduler(0)


if __name__ == "__main__":
    unittest.main()
