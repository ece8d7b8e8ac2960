import pytest
from httpx import AsyncClient

from tests.factories import FashnPredictionFactory
from tests.helpers import FASHN_URL, parse_sse, upstream_json

RUN_URL = f"{FASHN_URL}/run"

PERSON = ("person.jpg", b"person-bytes", "image/jpeg")
GARMENT = ("shirt.png", b"garment-bytes", "image/png")


@pytest.mark.unit
class TestTryOnEndpoints:
    """Test FASHN try-on submission, status and event stream endpoints."""

    async def test_submit_with_defaults(self, async_client: AsyncClient, upstream):
        upstream.add("POST", RUN_URL, json={"id": "pred-1", "error": None})

        response = await async_client.post("/fashn/tryon", files={"person": PERSON, "garment": GARMENT})

        assert response.status_code == 200
        assert response.json() == {"id": "pred-1", "error": None}

        sent = upstream.calls("POST", RUN_URL)[0]
        assert sent.headers["Authorization"] == "Bearer test-fashn-key"
        payload = upstream_json(sent)
        assert payload["model_name"] == "tryon-v1.6"
        assert payload["inputs"]["model_image"].startswith("data:image/jpeg;base64,")
        assert payload["inputs"]["garment_image"].startswith("data:image/png;base64,")
        assert payload["category"] == "auto"
        assert payload["segmentation_free"] is True
        assert payload["moderation_level"] == "permissive"
        assert payload["garment_photo_type"] == "auto"
        assert payload["mode"] == "balanced"
        assert payload["seed"] == 42
        assert payload["num_samples"] == 1
        assert payload["output_format"] == "png"
        assert payload["return_base64"] is False

    async def test_submit_with_options(self, async_client: AsyncClient, upstream):
        upstream.add("POST", RUN_URL, json={"id": "pred-2", "error": None})

        response = await async_client.post(
            "/fashn/tryon",
            files={"person": PERSON, "garment": GARMENT},
            data={"category": "tops", "num_samples": "10", "seed": "123", "return_base64": "true"}
        )

        assert response.status_code == 200
        payload = upstream_json(upstream.calls("POST", RUN_URL)[0])
        assert payload["category"] == "tops"
        assert payload["num_samples"] == 4
        assert payload["seed"] == 123
        assert payload["return_base64"] is True

    async def test_missing_garment(self, async_client: AsyncClient, upstream):
        response = await async_client.post("/fashn/tryon", files={"person": PERSON})

        assert response.status_code == 400
        assert response.json() == {"error": "Please upload both person and garment images."}
        assert upstream.requests == []

    async def test_empty_garment_file_counts_as_missing(self, async_client: AsyncClient, upstream):
        response = await async_client.post(
            "/fashn/tryon",
            files={"person": PERSON, "garment": ("", b"", "application/octet-stream")}
        )

        assert response.status_code == 400
        assert upstream.requests == []

    async def test_upstream_failure(self, async_client: AsyncClient, upstream):
        upstream.add("POST", RUN_URL, status_code=400, json={"error": "BadRequest", "message": "invalid image"})

        response = await async_client.post("/fashn/tryon", files={"person": PERSON, "garment": GARMENT})

        assert response.status_code == 500
        assert response.json() == {"error": {"error": "BadRequest", "message": "invalid image"}}

    async def test_get_status(self, async_client: AsyncClient, upstream):
        prediction = FashnPredictionFactory(id="pred-1", completed=True)
        upstream.add("GET", f"{FASHN_URL}/status/pred-1", json=prediction)

        response = await async_client.get("/fashn/tryon/pred-1")

        assert response.status_code == 200
        assert response.json() == prediction

    async def test_event_stream_until_completed(self, async_client: AsyncClient, upstream):
        status_url = f"{FASHN_URL}/status/pred-1"
        processing = FashnPredictionFactory(id="pred-1", status="processing")
        completed = FashnPredictionFactory(id="pred-1", completed=True)
        upstream.add("GET", status_url, json=FashnPredictionFactory(id="pred-1", status="starting"))
        upstream.add("GET", status_url, json=processing)
        upstream.add("GET", status_url, json=completed)

        response = await async_client.get("/fashn/events/pred-1")

        events = parse_sse(response.text)
        assert [event for event, _ in events] == [None, None, None, "finished"]
        assert events[-1][1] == completed
        assert events[-2][1] == completed
        assert len(upstream.calls("GET", status_url)) == 3

    async def test_event_stream_stops_on_failed(self, async_client: AsyncClient, upstream):
        status_url = f"{FASHN_URL}/status/pred-2"
        failed = FashnPredictionFactory(id="pred-2", failed=True)
        upstream.add("GET", status_url, json=failed)

        response = await async_client.get("/fashn/events/pred-2")

        assert parse_sse(response.text) == [(None, failed), ("finished", failed)]
