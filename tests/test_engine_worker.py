import queue
import unittest

from cv_scoring.application.services.engine_worker import EngineWorker


class EngineWorkerTests(unittest.TestCase):
    def setUp(self):
        self.responses: "queue.Queue[dict]" = queue.Queue()
        self.worker = EngineWorker(on_response=self.responses.put, name="test-engine")
        self.worker.start()
        self.assertTrue(self.worker.wait_ready(timeout=10))

    def tearDown(self):
        self.worker.stop()

    def test_round_trip(self):
        self.worker.post({"type": "analyze_complexity", "id": "c1", "payload": {"text": ""}})
        response = self.responses.get(timeout=5)
        self.assertEqual(response, {"type": "complexity_result", "id": "c1", "payload": {"score": 0, "level": "compact"}})

    def test_message_is_copied_on_post(self):
        payload = {"cvText": "Python Machine Learning", "jobText": "Python Machine Learning"}
        self.worker.post({"type": "analyze_relevance", "id": "r1", "payload": payload})
        payload["jobText"] = "Figma"

        response = self.responses.get(timeout=5)
        self.assertEqual(response["payload"], {"similarity": 100})

    def test_keeps_serving_after_error(self):
        self.worker.post({"type": "nope", "id": "e1", "payload": {}})
        self.worker.post({"type": "analyze_complexity", "id": "ok", "payload": {"text": "Short one."}})

        first = self.responses.get(timeout=5)
        second = self.responses.get(timeout=5)
        self.assertEqual(first["type"], "error")
        self.assertEqual(second["type"], "complexity_result")
        self.assertTrue(self.worker.is_alive)

    def test_stop(self):
        self.worker.stop()
        self.assertFalse(self.worker.is_alive)


class UntrainedWorkerTests(unittest.TestCase):
    def test_failed_training_answers_not_ready(self):
        responses: "queue.Queue[dict]" = queue.Queue()
        worker = EngineWorker(on_response=responses.put, corpus=[], name="empty-engine")
        worker.start()
        try:
            self.assertTrue(worker.wait_ready(timeout=10))
            worker.post({"type": "analyze_complexity", "id": "x", "payload": {"text": "Hi."}})
            self.assertEqual(responses.get(timeout=5), {"type": "error", "id": "x", "payload": "AI not ready"})
        finally:
            worker.stop()


if __name__ == "__main__":
    unittest.main()
