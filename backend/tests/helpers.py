import json

MESHY_URL = "https://api.meshy.ai/openapi/v1"
FASHN_URL = "https://api.fashn.ai/v1"


def parse_sse(body: str) -> list:
    """Split an SSE body into (event, data) pairs; event is None for unnamed messages."""
    events = []
    for block in body.split("\n\n"):
        if not block.strip():
            continue
        event = None
        data = None
        for line in block.split("\n"):
            if line.startswith("event: "):
                event = line[len("event: "):]
            elif line.startswith("data: "):
                data = json.loads(line[len("data: "):])
        events.append((event, data))
    return events


def upstream_json(request) -> dict:
    """JSON body the relay sent upstream."""
    return json.loads(request.content)
