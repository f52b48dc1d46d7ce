import os
import sys

import httpx

from spec import DEFAULT_SOCKET_PATH


def send(text: str, socket_path: str):
    transport = httpx.HTTPTransport(uds=socket_path)
    with httpx.Client(transport=transport, base_url="http://explaind") as client:
        response = client.post("/", content=text.encode("utf-8"))
    print("STATUS", response.status_code)


# After `pip install -e .`:  echo "text" | python tools/send_text.py
if __name__ == "__main__":
    payload = sys.argv[1] if len(sys.argv) > 1 else sys.stdin.read()
    send(payload, os.environ.get("EXPLAIN_SOCKET", DEFAULT_SOCKET_PATH))
