from main import OPENAPI_TAGS, app


def test_openapi_metadata():
    app.openapi_schema = None
    schema = app.openapi()

    assert schema["info"]["title"] == "Event Budget API"
    assert [t["name"] for t in schema["tags"]] == [t["name"] for t in OPENAPI_TAGS]
    assert schema["components"]["securitySchemes"]["ActorHeader"]["name"] == "X-Actor-Id"
    assert "/api/v1/events/{event_id}/packages/{package_id}/apply" in schema["paths"]
