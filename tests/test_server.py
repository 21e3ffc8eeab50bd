"""
Tests for the minic HTTP API
============================

Usage:
    python -m pytest tests/test_server.py -v
"""
import sys
import os
import unittest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fastapi.testclient import TestClient

from minic import __version__
from minic.server import app


class TestApi(unittest.TestCase):

    def setUp(self):
        self.client = TestClient(app)

    def test_health(self):
        resp = self.client.get("/api/health")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"status": "ok", "version": __version__})

    def test_analyze_accepted(self):
        resp = self.client.post("/api/analyze", json={"source": "int x = 5; int y = x + 1;"})
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertTrue(body["ok"])
        self.assertIsNone(body["diagnostic"])
        self.assertEqual([s["name"] for s in body["symbols"]], ["x", "y"])
        self.assertEqual(body["events"][0],
                         {"event": "token", "kind": "KEYWORD", "lexeme": "int", "line": 1, "column": 1})
        self.assertEqual(body["events"][-1]["kind"], "EOF")

    def test_analyze_rejected(self):
        resp = self.client.post("/api/analyze", json={"source": "{ int x; } x = 1;"})
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertFalse(body["ok"])
        diag = body["diagnostic"]
        self.assertEqual(diag["category"], "semantic")
        self.assertEqual(diag["error"], "UndeclaredUseError")
        self.assertEqual((diag["line"], diag["column"], diag["near"]), (1, 12, "x"))
        self.assertEqual(body["events"][-1]["event"], "diagnostic")
        scope_events = [e for e in body["events"] if e["event"] == "scope"]
        self.assertEqual([e["action"] for e in scope_events], ["enter", "exit"])

    def test_analyze_without_trace(self):
        resp = self.client.post("/api/analyze", json={"source": "int a; int a;", "trace": False})
        body = resp.json()
        self.assertEqual(len(body["events"]), 1)
        self.assertEqual(body["events"][0]["event"], "diagnostic")

    def test_analyze_limits(self):
        resp = self.client.post("/api/analyze",
                                json={"source": "int a; int b;", "max_symbols": 1})
        self.assertEqual(resp.json()["diagnostic"]["category"], "capacity")

    def test_analyze_deep_input_with_high_limit(self):
        source = "int x; " + "(" * 3000 + "x" + ")" * 3000 + ";"
        resp = self.client.post("/api/analyze",
                                json={"source": source, "max_depth": 5000, "trace": False})
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertFalse(body["ok"])
        self.assertEqual(body["diagnostic"]["category"], "syntax")
        self.assertEqual(body["diagnostic"]["message"], "nesting too deep")

    def test_analyze_invalid_limit(self):
        resp = self.client.post("/api/analyze", json={"source": "int a;", "max_depth": 0})
        self.assertEqual(resp.status_code, 422)

    def test_analyze_missing_source(self):
        resp = self.client.post("/api/analyze", json={})
        self.assertEqual(resp.status_code, 422)

    def test_tokens(self):
        resp = self.client.post("/api/tokens", json={"source": "a&&b"})
        self.assertEqual(resp.status_code, 200)
        tokens = resp.json()["tokens"]
        self.assertEqual([t["lexeme"] for t in tokens], ["a", "&&", "b", None])
        self.assertEqual(tokens[1]["kind"], "OPERATOR")


if __name__ == "__main__":
    unittest.main()
