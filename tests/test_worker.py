import random
import threading
import unittest
from unittest.mock import patch

from dotknot.config import GeneratorConfig
from dotknot.errors import GenerationInProgress, InvalidParameterError
from dotknot.level import Level
from dotknot.worker import GenerationWorker


class GenerationWorkerTests(unittest.TestCase):
    def test_idle_before_first_run(self) -> None:
        worker = GenerationWorker()
        self.assertFalse(worker.is_running())
        self.assertIsNone(worker.result())
        self.assertEqual(worker.status(), {"state": "idle"})

    def test_generates_in_background(self) -> None:
        worker = GenerationWorker()
        worker.start(GeneratorConfig(rows=3, cols=3, pairs=2), rng=random.Random(2))
        self.assertTrue(worker.wait(timeout=60))
        level = worker.result()
        self.assertIsInstance(level, Level)
        status = worker.status()
        self.assertEqual(status["state"], "done")
        self.assertIn("elapsed_s", status)

    def test_start_returns_this_runs_result(self) -> None:
        worker = GenerationWorker()
        job = worker.start(GeneratorConfig(rows=3, cols=3, pairs=2), rng=random.Random(2))
        level = job.result(timeout=60)
        self.assertIsInstance(level, Level)
        self.assertTrue(worker.wait(timeout=10))
        self.assertIs(worker.result(), level)

        failing = worker.start(GeneratorConfig(rows=2, cols=2, pairs=5))
        with self.assertRaises(InvalidParameterError):
            failing.result(timeout=10)

    def test_second_request_while_running_is_rejected(self) -> None:
        release = threading.Event()
        level = Level.from_flow_text("A.A\n")

        def slow_generate() -> Level:
            release.wait(timeout=10)
            return level

        worker = GenerationWorker()
        with patch("dotknot.worker.LevelGenerator") as generator_cls:
            generator_cls.return_value.generate.side_effect = slow_generate
            worker.start(GeneratorConfig())
            self.assertTrue(worker.is_running())
            self.assertEqual(worker.status()["state"], "running")
            with self.assertRaises(GenerationInProgress):
                worker.start(GeneratorConfig())
            release.set()
            self.assertTrue(worker.wait(timeout=10))
        self.assertIs(worker.result(), level)

    def test_failure_is_reported(self) -> None:
        worker = GenerationWorker()
        worker.start(GeneratorConfig(rows=2, cols=2, pairs=5))
        self.assertTrue(worker.wait(timeout=10))
        self.assertEqual(worker.status()["state"], "failed")
        with self.assertRaises(InvalidParameterError):
            worker.result()

    def test_worker_can_run_again_after_finishing(self) -> None:
        worker = GenerationWorker()
        worker.start(GeneratorConfig(rows=2, cols=2, pairs=5))
        worker.wait(timeout=10)
        worker.start(GeneratorConfig(rows=2, cols=2, pairs=1), rng=random.Random(0))
        self.assertTrue(worker.wait(timeout=60))
        self.assertEqual(worker.status()["state"], "done")


if __name__ == "__main__":
    unittest.main()
