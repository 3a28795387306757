"""Tests for run endpoints."""

import uuid

import pytest
from httpx import AsyncClient


async def create_run(client: AsyncClient, payload: dict, exit=None, key=None) -> dict:
    maze = (await client.post("/v1/maze", json=payload)).json()
    body = {"maze_id": maze["id"]}
    if exit is not None:
        body["exit"] = exit
    if key is not None:
        body["key"] = key
    response = await client.post("/v1/run", json=body)
    assert response.status_code == 201
    return response.json()


# Opposite corners of the 11x9 sample maze
EXIT = {"x": 10, "y": 8}
KEY = {"x": 10, "y": 0}
PLAYER = {"x": 100.0, "y": 100.0}


class TestCreateRun:
    """Tests for POST /v1/run."""

    @pytest.mark.asyncio
    async def test_create_run(self, client: AsyncClient, generate_payload: dict):
        """Test starting a run with both targets."""
        run = await create_run(client, generate_payload, EXIT, KEY)
        assert run["exit_position"] == EXIT
        assert run["key_position"] == KEY
        assert run["target_position"] == EXIT
        assert run["path_visible"] is False
        assert run["discovery"] == {
            "exit_discovered": False,
            "key_collected": False,
            "current_target": "exit",
            "ability_unlocked": False,
            "ability_permanently_locked": False,
            "ability_available": False,
            "can_finish": False,
        }

    @pytest.mark.asyncio
    async def test_wall_target_snapped(self, client: AsyncClient, generate_payload: dict):
        """Test that a target placed in a wall is moved onto floor."""
        run = await create_run(client, generate_payload, exit={"x": 1, "y": 1})
        assert run["exit_position"] == {"x": 0, "y": 0}

    @pytest.mark.asyncio
    async def test_run_without_targets(self, client: AsyncClient, generate_payload: dict):
        """Test that targets are optional."""
        run = await create_run(client, generate_payload)
        assert run["exit_position"] is None
        assert run["target_position"] is None

    @pytest.mark.asyncio
    async def test_unreachable_target(self, client: AsyncClient, generate_payload: dict):
        """Test that a target far outside the maze is rejected."""
        maze = (await client.post("/v1/maze", json=generate_payload)).json()
        response = await client.post(
            "/v1/run",
            json={"maze_id": maze["id"], "exit": {"x": 500, "y": 500}},
        )
        assert response.status_code == 422
        assert "exit" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_unknown_maze(self, client: AsyncClient):
        """Test that runs need an existing maze."""
        response = await client.post("/v1/run", json={"maze_id": str(uuid.uuid4())})
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_get_run(self, client: AsyncClient, generate_payload: dict):
        """Test fetching a run by id."""
        run = await create_run(client, generate_payload, EXIT, KEY)
        response = await client.get(f"/v1/run/{run['id']}")
        assert response.status_code == 200
        assert response.json()["id"] == run["id"]

    @pytest.mark.asyncio
    async def test_get_unknown_run(self, client: AsyncClient):
        """Test that an unknown run returns 404."""
        response = await client.get(f"/v1/run/{uuid.uuid4()}")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_run_eviction(self, client: AsyncClient, run_service, generate_payload: dict):
        """Test that the oldest run is dropped past the storage limit."""
        run_service.max_stored = 2
        first = await create_run(client, generate_payload, EXIT, KEY)
        second = await create_run(client, generate_payload, EXIT, KEY)
        await create_run(client, generate_payload, EXIT, KEY)

        assert (await client.get(f"/v1/run/{first['id']}")).status_code == 404
        assert (await client.get(f"/v1/run/{second['id']}")).status_code == 200


class TestDiscoveryEvents:
    """Tests for exit and key events."""

    @pytest.mark.asyncio
    async def test_exit_then_key(self, client: AsyncClient, generate_payload: dict):
        """Test the exit-first flow unlocks the ability and retargets twice."""
        run = await create_run(client, generate_payload, EXIT, KEY)

        response = await client.post(f"/v1/run/{run['id']}/exit-discovered")
        assert response.status_code == 200
        data = response.json()
        assert data["state"]["current_target"] == "key"
        assert data["state"]["ability_unlocked"] is True
        assert data["notifications"] == [
            {"type": "ability_unlocked", "previous": None, "target": None},
            {"type": "target_changed", "previous": "exit", "target": "key"},
        ]

        response = await client.post(f"/v1/run/{run['id']}/key-collected")
        data = response.json()
        assert data["state"]["current_target"] == "exit"
        assert data["state"]["ability_permanently_locked"] is False
        assert data["state"]["ability_available"] is True
        assert data["state"]["can_finish"] is True
        assert data["notifications"] == [
            {"type": "target_changed", "previous": "key", "target": "exit"},
        ]

    @pytest.mark.asyncio
    async def test_key_first(self, client: AsyncClient, generate_payload: dict):
        """Test that collecting the key first locks the ability silently."""
        run = await create_run(client, generate_payload, EXIT, KEY)

        response = await client.post(f"/v1/run/{run['id']}/key-collected")
        data = response.json()
        assert data["state"]["current_target"] == "exit"
        assert data["state"]["ability_permanently_locked"] is True
        assert data["state"]["ability_unlocked"] is False
        assert data["notifications"] == []

    @pytest.mark.asyncio
    async def test_repeated_event(self, client: AsyncClient, generate_payload: dict):
        """Test that a repeated event fires nothing."""
        run = await create_run(client, generate_payload, EXIT, KEY)
        await client.post(f"/v1/run/{run['id']}/exit-discovered")

        response = await client.post(f"/v1/run/{run['id']}/exit-discovered")
        assert response.json()["notifications"] == []

    @pytest.mark.asyncio
    async def test_event_unknown_run(self, client: AsyncClient):
        """Test events against a missing run."""
        response = await client.post(f"/v1/run/{uuid.uuid4()}/key-collected")
        assert response.status_code == 404


class TestGuidePath:
    """Tests for show, toggle and hide."""

    @pytest.mark.asyncio
    async def test_show_path(self, client: AsyncClient, generate_payload: dict):
        """Test that the path leads from the player to the exit."""
        run = await create_run(client, generate_payload, EXIT, KEY)
        response = await client.post(
            f"/v1/run/{run['id']}/path/show", json={"world_position": PLAYER}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["path_visible"] is True
        assert data["current_path"]["success"] is True
        assert data["current_path"]["grid_coordinates"][0] == {"x": 0, "y": 0}
        assert data["current_path"]["grid_coordinates"][-1] == EXIT

    @pytest.mark.asyncio
    async def test_path_follows_target(self, client: AsyncClient, generate_payload: dict):
        """Test that after the exit is seen the path leads to the key."""
        run = await create_run(client, generate_payload, EXIT, KEY)
        await client.post(f"/v1/run/{run['id']}/exit-discovered")
        response = await client.post(
            f"/v1/run/{run['id']}/path/show", json={"world_position": PLAYER}
        )
        assert response.json()["current_path"]["grid_coordinates"][-1] == KEY

    @pytest.mark.asyncio
    async def test_toggle_and_hide(self, client: AsyncClient, generate_payload: dict):
        """Test toggling visibility and hiding."""
        run = await create_run(client, generate_payload, EXIT, KEY)
        url = f"/v1/run/{run['id']}/path"

        toggled = await client.post(f"{url}/toggle", json={"world_position": PLAYER})
        assert toggled.json()["path_visible"] is True

        toggled = await client.post(f"{url}/toggle", json={"world_position": PLAYER})
        assert toggled.json()["path_visible"] is False

        await client.post(f"{url}/show", json={"world_position": PLAYER})
        hidden = await client.post(f"{url}/hide")
        assert hidden.json()["path_visible"] is False
        assert hidden.json()["current_path"]["success"] is True

    @pytest.mark.asyncio
    async def test_show_path_without_target(self, client: AsyncClient, generate_payload: dict):
        """Test that a run without an exit reports an invalid target cell."""
        run = await create_run(client, generate_payload)
        response = await client.post(
            f"/v1/run/{run['id']}/path/show", json={"world_position": PLAYER}
        )
        data = response.json()
        assert data["path_visible"] is True
        assert data["current_path"]["success"] is False
        assert data["current_path"]["error"] == "invalid_cell"
        assert data["current_path"]["grid_coordinates"] == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("value", ["Infinity", "NaN"])
    async def test_show_path_non_finite_position(
        self, client: AsyncClient, generate_payload: dict, value: str
    ):
        """Test that inf and nan player positions are rejected."""
        run = await create_run(client, generate_payload, EXIT, KEY)
        response = await client.post(
            f"/v1/run/{run['id']}/path/show",
            content=f'{{"world_position": {{"x": {value}, "y": 100.0}}}}',
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 422
        assert (await client.get(f"/v1/run/{run['id']}")).json()["path_visible"] is False


class TestRunView:
    """Tests for POST /v1/run/{id}/view."""

    @pytest.mark.asyncio
    async def test_view_markers(self, client: AsyncClient, generate_payload: dict):
        """Test that the view marks exit, key and player."""
        run = await create_run(client, generate_payload, EXIT, KEY)
        response = await client.post(f"/v1/run/{run['id']}/view", json={"world_position": PLAYER})
        assert response.status_code == 200
        data = response.json()
        assert len(data["rows"]) == 9
        assert all(len(row) == 11 for row in data["rows"])
        assert data["player_position"] == {"x": 0, "y": 0}
        assert data["rows"][0][0] == "@"
        assert data["rows"][0][10] == "K"
        assert data["rows"][8][10] == "E"
        assert "*" not in "".join(data["rows"])

    @pytest.mark.asyncio
    async def test_view_player_in_wall(self, client: AsyncClient, generate_payload: dict):
        """Test that a player inside a wall is drawn on the nearest floor."""
        run = await create_run(client, generate_payload, EXIT, KEY)
        response = await client.post(
            f"/v1/run/{run['id']}/view", json={"world_position": {"x": 300.0, "y": 300.0}}
        )
        assert response.json()["player_position"] == {"x": 0, "y": 0}

    @pytest.mark.asyncio
    async def test_view_visible_path(self, client: AsyncClient, generate_payload: dict):
        """Test that a shown path is drawn and a hidden one is not."""
        run = await create_run(client, generate_payload, EXIT, KEY)
        url = f"/v1/run/{run['id']}"

        await client.post(f"{url}/path/show", json={"world_position": PLAYER})
        shown = await client.post(f"{url}/view", json={})
        assert shown.json()["player_position"] is None
        assert "*" in "".join(shown.json()["rows"])

        await client.post(f"{url}/path/hide")
        hidden = await client.post(f"{url}/view", json={})
        assert "*" not in "".join(hidden.json()["rows"])

    @pytest.mark.asyncio
    async def test_view_unknown_run(self, client: AsyncClient):
        """Test that an unknown run returns 404."""
        response = await client.post(f"/v1/run/{uuid.uuid4()}/view", json={})
        assert response.status_code == 404
