"""
Tests for the command-line front end.
"""

import asyncio
from unittest.mock import patch

import pytest

from Vesta.__main__ import main, parse
from Vesta.core.client.services.persistence_service import LocalStorage
from Vesta.core.realtime import topics
from Vesta.core.realtime.websocket_service import WebSocketService
from Vesta.start import client
from Vesta.test.conftest import WS_URL, eventually, user_payload


def save_session(state_dir, token="jwt-1"):
    storage = LocalStorage(str(state_dir))
    storage.set_session(token, user_payload())
    storage.save_sync()


class TestArguments:

    def test_login(self):
        args = parse(['--api-url', 'http://api.test/api', 'login', 'ayse'])
        assert args.command == 'login'
        assert args.username == 'ayse'
        assert args.password is None
        assert args.api_url == 'http://api.test/api'

    def test_compare_defaults(self):
        args = parse(['compare', '1', '2'])
        assert args.ids == [1, 2]
        assert args.category == 'REAL_ESTATE'

    def test_compare_rejects_unknown_category(self):
        with pytest.raises(SystemExit):
            parse(['compare', '1', '2', '--category', 'BOAT'])

    def test_watch_listings(self):
        args = parse(['watch', '--listing', '4', '5'])
        assert args.listing == [4, 5]
        assert args.ws_url is None

    def test_command_required(self):
        with pytest.raises(SystemExit):
            parse([])

    def test_send_needs_open(self):
        with pytest.raises(SystemExit):
            main(['--env', 'testing', 'conversations', '--send', 'hello'])


class TestCommands:

    def test_logout_clears_stored_session(self, tmp_path, capsys):
        save_session(tmp_path)

        main(['--env', 'testing', '--state-dir', str(tmp_path), 'logout'])

        assert LocalStorage(str(tmp_path)).load_sync() == {}
        assert "Logged out" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_notifications_need_login(self, backend, tmp_path, capsys):
        await client._notifications(False, [], api_url=backend.base_url, state_dir=str(tmp_path))

        assert "Not logged in" in capsys.readouterr().out
        assert backend.requests == []

    @pytest.mark.asyncio
    async def test_notifications_listing(self, backend, tmp_path, capsys):
        save_session(tmp_path)
        backend.reply("GET", "/notifications", [
            {"id": 1, "title": "Favorite", "message": "Your listing was saved", "isRead": False},
            {"id": 2, "title": "Viewed", "message": "Your listing was viewed", "isRead": True},
        ])
        backend.reply("PUT", "/notifications/1/read", None)

        await client._notifications(False, [1], api_url=backend.base_url, state_dir=str(tmp_path))

        out = capsys.readouterr().out
        assert "[1]" in out and "[2]" in out
        assert "Unread: 0" in out
        assert backend.requests[0].headers["Authorization"] == "Bearer jwt-1"

    @pytest.mark.asyncio
    async def test_compare_prints_table(self, backend, tmp_path, capsys):
        backend.reply("POST", "/compare", {
            "category": "REAL_ESTATE",
            "fields": [{"fieldName": "price", "values": {"1": "100", "2": "200"}}],
        })

        await client._compare([1, 2], "REAL_ESTATE", api_url=backend.base_url, state_dir=str(tmp_path))

        lines = capsys.readouterr().out.splitlines()
        assert lines[0].split() == ["field", "1", "2"]
        assert lines[1].split() == ["price", "100", "200"]

    @pytest.mark.asyncio
    async def test_compare_single_listing(self, backend, tmp_path, capsys):
        await client._compare([1], "LAND", api_url=backend.base_url, state_dir=str(tmp_path))

        assert "Select at least two listings to compare" in capsys.readouterr().out
        assert backend.requests == []

    @pytest.mark.asyncio
    async def test_watch_follows_user_topics(self, backend, broker, tmp_path, capsys):
        save_session(tmp_path)
        backend.reply("GET", "/notifications", [])
        backend.reply("GET", "/messages/conversations", [])
        stop = asyncio.Event()

        def make_service(url, connect_headers=None):
            return WebSocketService(WS_URL, reconnect_delay=0.05, connector=broker.connector,
                                    connect_headers=connect_headers)

        with patch("Vesta.start.client.WebSocketService", side_effect=make_service):
            task = asyncio.ensure_future(client._watch([4], api_url=backend.base_url,
                                                       state_dir=str(tmp_path), stop=stop))
            assert await eventually(lambda: broker.subscribed(topics.notifications(7))
                                    and broker.subscribed(topics.messages(7))
                                    and broker.subscribed(topics.favorite_count(4)))

            broker.publish(topics.notifications(7), {"id": 1, "title": "Favorite"})
            broker.publish(topics.favorite_count(4), {"listingId": 4, "favoriteCount": 12})
            output = []
            assert await eventually(lambda: output.append(capsys.readouterr().out)
                                    or "Listing 4: 12 favorites" in "".join(output))

            stop.set()
            await asyncio.wait_for(task, 2.0)

        from Vesta.core.network.protocol import Command
        assert broker.frames_of(Command.CONNECT)[0].headers["Authorization"] == "Bearer jwt-1"
        assert len(broker.frames_of(Command.DISCONNECT)) == 1
