#!/usr/bin/env python3
"""
Simple development server for Stormscope.
Serves static files and a strike endpoint backed by a BoltWorker pool.

    POST /api/strike   {"width": 800, "height": 600, "seed": null}
    -> {"image": <base64 png>, "shakeIntensity": 0.66, "didStrike": true, ...}
"""

import json
import sys
from http.server import HTTPServer, SimpleHTTPRequestHandler
from pathlib import Path
from urllib.parse import urlparse

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from stormscope.bolt.worker import BoltWorker  # noqa: E402
from stormscope.io.exporter import ResultExporter  # noqa: E402

worker = BoltWorker()
exporter = ResultExporter()


class StrikeHandler(SimpleHTTPRequestHandler):
    """HTTP handler for the Stormscope dev server."""

    def __init__(self, *args, **kwargs):
        self.directory = str(Path(__file__).parent)
        super().__init__(*args, directory=self.directory, **kwargs)

    def do_POST(self):
        parsed = urlparse(self.path)

        if parsed.path == "/api/strike":
            self.handle_strike()
        else:
            self.send_error(404, "Not found")

    def _send_json(self, status: int, payload: dict):
        body = json.dumps(payload).encode()
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def handle_strike(self):
        """Generate one strike and return it as JSON."""
        try:
            content_length = int(self.headers.get("Content-Length") or 0)
            raw = self.rfile.read(content_length) if content_length else b""
            message = json.loads(raw) if raw else {}
            if not isinstance(message, dict):
                self._send_json(400, {"error": "Expected a JSON object"})
                return
        except (ValueError, json.JSONDecodeError) as e:
            self._send_json(400, {"error": f"Invalid request: {e}"})
            return

        # The worker always answers; failures come back as a degraded response
        response = worker.submit(message).result()
        self._send_json(200, exporter.to_dict(response))

    def log_message(self, format, *args):
        """Custom log format."""
        print(f"[Stormscope] {args[0]}")


def run_server(port=8080):
    """Run the development server."""
    httpd = HTTPServer(("", port), StrikeHandler)
    print(f"Stormscope dev server running at http://localhost:{port} (Ctrl+C to stop)")

    try:
        httpd.serve_forever()
    except KeyboardInterrupt:
        print("\nShutting down...")
        httpd.shutdown()
    finally:
        worker.close()


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Stormscope dev server")
    parser.add_argument("-p", "--port", type=int, default=8080, help="Port to run on")
    args = parser.parse_args()

    run_server(args.port)
