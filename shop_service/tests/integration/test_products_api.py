"""
Integration tests for the shop HTTP surface.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from aiokafka.errors import KafkaConnectionError
from httpx import ASGITransport, AsyncClient

from product_sync.events import INT64_MAX, STORE_CONTROL_TOPIC, ProductMessage
from product_sync.events.kafka_client import KafkaEventPublisher
from shop_service.app.main import create_app
from shop_service.app.events.event_consumers import ProductStatusHandler


class TestProductLifecycle:
    """Create, read, update, delete through the HTTP API."""

    @pytest.mark.asyncio
    async def test_create_product(
        self, client: AsyncClient, sample_product_data, recording_publisher
    ):
        response = await client.post("/products", json=sample_product_data)

        assert response.status_code == 201
        assert response.headers["location"] == "/1"
        assert response.json() == {
            "id": 1,
            "name": "Test Product",
            "productTypeDTO": "OTHER",
            "expirationDate": "2002-02-18",
            "quantity": 5,
        }
        assert recording_publisher.on(STORE_CONTROL_TOPIC) == [
            ProductMessage(id=1, quantity=5)
        ]

    @pytest.mark.asyncio
    async def test_status_reply_converges_quantity(
        self, client: AsyncClient, shop_app, sample_product_data
    ):
        await client.post("/products", json=sample_product_data)
        handler = ProductStatusHandler(shop_app.state.database_manager.async_session_maker)

        await handler.handle(ProductMessage(id=1, quantity=0))

        response = await client.get("/products/1")
        assert response.status_code == 200
        assert response.json()["quantity"] == 0

    @pytest.mark.asyncio
    async def test_get_unknown_product(self, client: AsyncClient):
        response = await client.get("/products/999")

        assert response.status_code == 404
        error = response.json()["error"]
        assert error["type"] == "http_error"
        assert error["message"] == "Product not found"
        assert error["details"] == {"product_id": 999}

    @pytest.mark.asyncio
    async def test_update_does_not_publish(
        self, client: AsyncClient, sample_product_data, recording_publisher
    ):
        await client.post("/products", json=sample_product_data)
        recording_publisher.messages.clear()

        response = await client.put(
            "/products/1",
            json={
                "name": "Updated",
                "productTypeDTO": "FRUITS",
                "expirationDate": "2023-12-31",
                "quantity": 7,
            },
        )

        assert response.status_code == 200
        assert response.json() == {
            "id": 1,
            "name": "Updated",
            "productTypeDTO": "FRUITS",
            "expirationDate": "2023-12-31",
            "quantity": 7,
        }
        assert recording_publisher.messages == []

    @pytest.mark.asyncio
    async def test_update_unknown_product(self, client: AsyncClient, sample_product_data):
        response = await client.put("/products/7", json=sample_product_data)

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_product(
        self, client: AsyncClient, shop_app, sample_product_data, recording_publisher
    ):
        await client.post("/products", json=sample_product_data)
        recording_publisher.messages.clear()

        response = await client.delete("/products/1")
        assert response.status_code == 204
        assert response.content == b""

        assert (await client.get("/products/1")).status_code == 404
        assert (await client.delete("/products/1")).status_code == 404
        assert recording_publisher.messages == []

        # A late warehouse reply for the deleted product is dropped
        handler = ProductStatusHandler(shop_app.state.database_manager.async_session_maker)
        await handler.handle(ProductMessage(id=1, quantity=0))
        assert (await client.get("/products/1")).status_code == 404

    @pytest.mark.asyncio
    async def test_list_products(self, client: AsyncClient, sample_product_data):
        assert (await client.get("/products")).json() == []

        for name in ("Product 1", "Product 2"):
            await client.post("/products", json={**sample_product_data, "name": name})

        response = await client.get("/products")

        assert response.status_code == 200
        body = response.json()
        assert [p["id"] for p in body] == [1, 2]
        assert [p["name"] for p in body] == ["Product 1", "Product 2"]


class TestProductValidation:
    """Malformed requests are rejected with 400 and a problem body."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "override",
        [
            {"name": ""},
            {"name": "   "},
            {"productTypeDTO": "TOYS"},
            {"expirationDate": "18/02/2002"},
            {"quantity": -1},
        ],
    )
    async def test_invalid_create_body(
        self, client: AsyncClient, sample_product_data, recording_publisher, override
    ):
        response = await client.post("/products", json={**sample_product_data, **override})

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["type"] == "validation_error"
        assert error["details"]["validation_errors"]
        assert recording_publisher.messages == []

    @pytest.mark.asyncio
    async def test_missing_fields(self, client: AsyncClient):
        response = await client.post("/products", json={"quantity": 1})

        assert response.status_code == 400
        fields = {
            e["field"] for e in response.json()["error"]["details"]["validation_errors"]
        }
        assert any("name" in field for field in fields)

    @pytest.mark.asyncio
    async def test_invalid_body_on_unknown_id_is_400(self, client: AsyncClient):
        response = await client.put("/products/999", json={"name": ""})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_non_numeric_id(self, client: AsyncClient):
        response = await client.get("/products/abc")

        assert response.status_code == 400

    @pytest.mark.asyncio
    @pytest.mark.parametrize("product_id", [0, INT64_MAX + 1, 99999999999999999999])
    async def test_out_of_range_id(self, client: AsyncClient, product_id):
        for method in ("GET", "DELETE"):
            response = await client.request(method, f"/products/{product_id}")
            assert response.status_code == 400
            assert response.json()["error"]["type"] == "validation_error"

    @pytest.mark.asyncio
    async def test_largest_id_is_not_found(self, client: AsyncClient):
        response = await client.get(f"/products/{INT64_MAX}")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_correlation_id_is_echoed(self, client: AsyncClient):
        response = await client.get(
            "/products/999", headers={"X-Correlation-ID": "corr-123"}
        )

        assert response.json()["error"]["correlation_id"] == "corr-123"


class TestHealth:
    @pytest.mark.asyncio
    async def test_health(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["service"] == "shop-service"
        assert body["status"] == "healthy"
        assert set(body["checks"]) == {"database", "event_publisher"}


class TestCreateWithUnreachableBus:
    """A product that is committed is reported as created whatever the bus does."""

    @pytest.fixture
    def kafka_publisher(self):
        publisher = KafkaEventPublisher(
            bootstrap_servers="localhost:9092",
            client_id="shop-service-producer",
            max_retries=1,
            retry_delay=0,
        )
        publisher.producer = MagicMock()
        publisher.producer.send_and_wait = AsyncMock(
            side_effect=KafkaConnectionError("down")
        )
        publisher.producer.stop = AsyncMock()
        publisher.is_connected = True
        return publisher

    @pytest.mark.asyncio
    async def test_create_when_topic_admin_is_down(
        self, shop_settings, kafka_publisher, sample_product_data
    ):
        app = create_app(shop_settings, event_publisher=kafka_publisher)

        with patch("product_sync.events.kafka_client.AIOKafkaAdminClient") as admin_cls:
            admin_cls.return_value.start = AsyncMock(
                side_effect=KafkaConnectionError("down")
            )
            admin_cls.return_value.close = AsyncMock()

            async with app.router.lifespan_context(app):
                transport = ASGITransport(app=app)
                async with AsyncClient(transport=transport, base_url="http://shop") as client:
                    response = await client.post("/products", json=sample_product_data)
                    assert response.status_code == 201
                    assert response.json()["id"] == 1

                    assert (await client.get("/products/1")).status_code == 200
