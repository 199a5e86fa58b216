"""
SMS Gateway Mock — stands in for the bulk SMS provider behind SMS_GATEWAY_URL.
POST /send with {"phone", "message"}; numbers starting with '+000' are rejected.
Listens on port 8003.
"""

import json
from http.server import BaseHTTPRequestHandler, HTTPServer


class SMSHandler(BaseHTTPRequestHandler):
    def do_POST(self):
        if self.path.rstrip("/") != "/send":
            self._respond(404, {"error": "Not found"})
            return
        length = int(self.headers.get("Content-Length", 0))
        try:
            body = json.loads(self.rfile.read(length) or b"{}")
        except ValueError:
            self._respond(400, {"error": "Body must be JSON"})
            return
        phone, message = body.get("phone", ""), body.get("message", "")
        if not phone or not message:
            self._respond(400, {"error": "phone and message are required"})
        elif phone.startswith("+000"):
            self._respond(422, {"error": f"Undeliverable number {phone}"})
        else:
            print(f"SMS → {phone}: {message}")
            self._respond(200, {"status": "queued", "phone": phone, "segments": len(message) // 160 + 1})

    def _respond(self, code, data):
        self.send_response(code)
        self.send_header("Content-Type", "application/json")
        self.end_headers()
        self.wfile.write(json.dumps(data).encode())

    def log_message(self, *_):
        pass


if __name__ == "__main__":
    server = HTTPServer(("0.0.0.0", 8003), SMSHandler)
    print("SMS Gateway Mock running on :8003")
    server.serve_forever()
