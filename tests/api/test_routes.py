import logging
import pytest
import uuid
from typing import AsyncGenerator
import httpx

from device_api.api.server import init_api, server
from device_api.db.session import sessionmanager

DB_URI = "sqlite+aiosqlite:///:memory:"
DEVICES = "/api/v1/devices"


@pytest.fixture
async def client() -> AsyncGenerator[httpx.AsyncClient, None]:
    sessionmanager.init(DB_URI)
    async with sessionmanager.connect() as conn:
        await sessionmanager.create_all(conn)

    transport = httpx.ASGITransport(app=server)
    async with httpx.AsyncClient(
        transport=transport, base_url="http://testserver"
    ) as client:
        yield client

    await sessionmanager.close()


async def create(
    client: httpx.AsyncClient, name: str = "Pixel 8", brand: str = "Google"
) -> httpx.Response:
    response = await client.post(DEVICES, json={"name": name, "brand": brand})
    assert response.status_code == 201
    return response


@pytest.mark.asyncio
async def test_api_root_get(client: httpx.AsyncClient) -> None:
    response = await client.get("/api/")
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_api_device_create_ok(client: httpx.AsyncClient) -> None:
    response = await create(client)

    json = response.json()
    assert json["name"] == "Pixel 8"
    assert json["brand"] == "Google"
    assert uuid.UUID(json["id"])
    assert json["createdAt"]

    self_href = json["_links"]["self"]["href"]
    assert self_href == f"http://testserver{DEVICES}/{json['id']}"
    assert response.headers["Location"] == self_href


@pytest.mark.asyncio
async def test_api_device_create_duplicate(
    client: httpx.AsyncClient,
) -> None:
    await create(client)

    response = await client.post(
        DEVICES, json={"name": "Pixel 8", "brand": "Google"}
    )

    assert response.status_code == 400
    assert response.json() == {
        "message": "DuplicateDevice",
        "description": "A device with the same name and brand already exists.",
    }


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body", [{"name": "Pixel 8"}, {"brand": "Google"}, {}, {"name": None}]
)
async def test_api_device_create_missing_fields(
    client: httpx.AsyncClient, body: dict[str, str | None]
) -> None:
    response = await client.post(DEVICES, json=body)

    assert response.status_code == 400
    assert response.json()["message"] == "MissingFields"
    assert (
        response.json()["description"]
        == "One or more mandatory fields are missing."
    )


@pytest.mark.asyncio
@pytest.mark.parametrize("content", ["wrong body", "", '{"name": ""}'])
async def test_api_device_create_unparsable_body(
    client: httpx.AsyncClient, content: str
) -> None:
    response = await client.post(
        DEVICES,
        content=content,
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json() == {
        "message": "UnparsableBody",
        "description": "The request body was unable to be parsed.",
    }


@pytest.mark.asyncio
async def test_api_device_get_by_id(client: httpx.AsyncClient) -> None:
    created = (await create(client)).json()

    response = await client.get(f"{DEVICES}/{created['id']}")

    assert response.status_code == 200
    assert response.json() == created


@pytest.mark.asyncio
async def test_api_device_get_by_id_not_found(
    client: httpx.AsyncClient,
) -> None:
    response = await client.get(f"{DEVICES}/{uuid.uuid4()}")

    assert response.status_code == 404
    assert response.json()["message"] == "DeviceNotFound"


@pytest.mark.asyncio
@pytest.mark.parametrize("method", ["GET", "PUT", "DELETE"])
async def test_api_device_unparsable_id(
    client: httpx.AsyncClient, method: str
) -> None:
    response = await client.request(
        method, f"{DEVICES}/not-a-uuid", json={"name": "x"}
    )

    assert response.status_code == 400
    assert response.json()["message"] == "UnparsableParameter"


@pytest.mark.asyncio
async def test_api_device_list_all(client: httpx.AsyncClient) -> None:
    for i in range(10):
        await create(client, name=f"device{i}")

    all_devices = (await client.get(DEVICES)).json()
    half = (await client.get(DEVICES, params={"size": 5})).json()
    none = (await client.get(DEVICES, params={"size": 10, "page": 1})).json()

    assert len(all_devices["_embedded"]["deviceResponseList"]) == 10
    assert all_devices["page"] == {
        "size": 20,
        "totalElements": 10,
        "totalPages": 1,
        "number": 0,
    }

    assert len(half["_embedded"]["deviceResponseList"]) == 5
    assert half["page"]["totalPages"] == 2
    assert half["_links"]["next"]["href"].endswith(
        f"{DEVICES}?page=1&size=5"
    )
    assert "prev" not in half["_links"]

    assert "_embedded" not in none
    assert none["page"]["totalElements"] == 10


@pytest.mark.asyncio
async def test_api_device_list_empty(client: httpx.AsyncClient) -> None:
    response = await client.get(DEVICES)

    assert response.status_code == 200
    json = response.json()
    assert "_embedded" not in json
    assert json["page"]["totalElements"] == 0
    assert json["_links"]["self"]["href"].endswith(f"{DEVICES}?page=0&size=20")


@pytest.mark.asyncio
async def test_api_device_list_size_is_clamped(
    client: httpx.AsyncClient,
) -> None:
    response = await client.get(DEVICES, params={"size": 100000})

    assert response.status_code == 200
    assert response.json()["page"]["size"] == 2000


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "params",
    [
        {"page": -1},
        {"size": 0},
        {"page": "first"},
        {"page": 10**18},
        {"page": 10**30, "size": 1},
    ],
)
async def test_api_device_list_bad_paging(
    client: httpx.AsyncClient, params: dict[str, int | str]
) -> None:
    response = await client.get(DEVICES, params=params)

    assert response.status_code == 400
    assert response.json()["message"] == "UnparsableParameter"


@pytest.mark.asyncio
async def test_api_device_search_by_brand(client: httpx.AsyncClient) -> None:
    await create(client, name="Pixel 8", brand="Google")
    await create(client, name="Pixel 9", brand="Google")
    await create(client, name="iPhone", brand="Apple")

    response = await client.get(f"{DEVICES}/brand/Google")

    assert response.status_code == 200
    devices = response.json()["_embedded"]["deviceResponseList"]
    assert {d["name"] for d in devices} == {"Pixel 8", "Pixel 9"}
    assert response.json()["_links"]["self"]["href"].endswith(
        f"{DEVICES}/brand/Google?page=0&size=20"
    )


@pytest.mark.asyncio
async def test_api_device_search_by_brand_no_match(
    client: httpx.AsyncClient,
) -> None:
    await create(client)

    response = await client.get(f"{DEVICES}/brand/Nokia")

    assert response.status_code == 200
    assert "_embedded" not in response.json()


@pytest.mark.asyncio
async def test_api_device_search_by_empty_brand(
    client: httpx.AsyncClient,
) -> None:
    await create(client)

    response = await client.get(f"{DEVICES}/brand/")

    assert response.status_code == 200
    json = response.json()
    assert "_embedded" not in json
    assert json["page"]["totalElements"] == 0
    assert json["_links"]["self"]["href"].endswith(
        f"{DEVICES}/brand/?page=0&size=20"
    )


@pytest.mark.asyncio
async def test_api_device_update(client: httpx.AsyncClient) -> None:
    created = (await create(client)).json()

    response = await client.put(
        f"{DEVICES}/{created['id']}", json={"brand": "Alphabet"}
    )

    assert response.status_code == 200
    json = response.json()
    assert json["name"] == "Pixel 8"
    assert json["brand"] == "Alphabet"
    assert json["createdAt"] == created["createdAt"]


@pytest.mark.asyncio
async def test_api_device_update_not_found(
    client: httpx.AsyncClient,
) -> None:
    response = await client.put(
        f"{DEVICES}/{uuid.uuid4()}", json={"name": "x"}
    )

    assert response.status_code == 404
    assert response.json()["message"] == "DeviceNotFound"


@pytest.mark.asyncio
async def test_api_device_update_duplicate(
    client: httpx.AsyncClient,
) -> None:
    await create(client, name="Pixel 8")
    target = (await create(client, name="Pixel 9")).json()

    response = await client.put(
        f"{DEVICES}/{target['id']}", json={"name": "Pixel 8"}
    )

    assert response.status_code == 400
    assert response.json()["message"] == "DuplicateDevice"

    unchanged = (await client.get(f"{DEVICES}/{target['id']}")).json()
    assert unchanged["name"] == "Pixel 9"


@pytest.mark.asyncio
async def test_api_device_update_unparsable_body(
    client: httpx.AsyncClient,
) -> None:
    created = (await create(client)).json()

    response = await client.put(
        f"{DEVICES}/{created['id']}",
        content="wrong body",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["message"] == "UnparsableBody"


@pytest.mark.asyncio
async def test_api_device_delete(client: httpx.AsyncClient) -> None:
    created = (await create(client)).json()

    response = await client.delete(f"{DEVICES}/{created['id']}")
    assert response.status_code == 204
    assert response.content == b""

    response = await client.get(f"{DEVICES}/{created['id']}")
    assert response.status_code == 404

    response = await client.delete(f"{DEVICES}/{created['id']}")
    assert response.status_code == 404
    assert response.json()["message"] == "DeviceNotFound"


def test_init_api_leaves_root_logger_alone() -> None:
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level

    init_api()

    assert root_logger.handlers == handlers
    assert root_logger.level == level
