import json
import sys
import tempfile
import unittest
from pathlib import Path

from fastapi.testclient import TestClient

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))
sys.path.insert(0, str(Path(__file__).resolve().parent))

from fake_toolchain import FakeToolchain
from gobook.server import create_app
from gobook.session import Session


def payload(**overrides):
    p = {
        "Fragment": 0,
        "Index": 0,
        "Contents": "",
        "Executing": True,
        "Filename": "test.md",
    }
    p.update(overrides)
    return json.dumps(p).encode("utf-8")


class TestServer(unittest.TestCase):
    def setUp(self):
        self._td = tempfile.TemporaryDirectory()
        self.tc = FakeToolchain(outputs={"fmt.Println(10 * 50)": "500\n"})
        self.session = Session(self.tc, Path(self._td.name) / "main.go")
        self.client = TestClient(create_app(self.session))

    def tearDown(self):
        self._td.cleanup()

    def test_multiply(self):
        resp = self.client.post("/", content=payload(Contents="fmt.Println(10 * 50)"))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.text, "500\n")
        self.assertTrue(resp.headers["content-type"].startswith("text/plain"))

    def test_get_with_body(self):
        resp = self.client.request("GET", "/", content=payload(Contents="fmt.Println(10 * 50)"))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.text, "500\n")

    def test_main_func_rejected(self):
        body = payload(Contents='\n\tfunc main() {\n\t\tfmt.Println("Should fail)\n\t}')
        resp = self.client.post("/", content=body)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(
            resp.text,
            "exit status 3\nMain function is generated automatically. Please remove func main()",
        )
        self.assertEqual(self.tc.formatted, 0)

    def test_type_returns_empty_body(self):
        body = payload(Contents="\n\ttype TestType struct {\n\t\tx string\n\t\ty int\n\t}")
        resp = self.client.post("/", content=body)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.text, "")

    def test_reformat_runs_after_response(self):
        self.client.post("/", content=payload(Contents="fmt.Println(10 * 50)"))
        self.assertEqual(self.tc.formatted, 1)

    def test_reformat_disabled(self):
        client = TestClient(create_app(self.session, reformat=False))
        client.post("/", content=payload(Contents="fmt.Println(10 * 50)"))
        self.assertEqual(self.tc.formatted, 0)

    def test_malformed_body(self):
        resp = self.client.post("/", content=b"not json")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.text, "")


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
