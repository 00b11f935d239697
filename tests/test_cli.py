from __future__ import annotations

import json

import httpx

from todoapp.cli import build_parser, format_todo, main, run_shell


class FakeServer:
    """httpx.MockTransport 后端：记录请求，按路由返回固定响应"""

    def __init__(self, todos: list[dict] | None = None) -> None:
        self.todos = todos or []
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if request.method == "GET" and path == "/todo":
            return httpx.Response(200, json={"todo": self.todos})
        if request.method == "POST" and path == "/todo":
            body = json.loads(request.content)
            todo = {"id": 1, "text": body["todo"]["text"], "done": False, "index": 0}
            return httpx.Response(201, json={"todo": todo})
        if request.method == "PUT" and path == "/todo/1":
            return httpx.Response(200, json={"todo": {"id": 1, "text": "Buy milk", "done": True, "index": 0}})
        if request.method == "PUT":
            return httpx.Response(404, text="Todo not found")
        if request.method == "DELETE":
            return httpx.Response(200)
        return httpx.Response(500, text="Internal error")

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


class ScriptedSession:
    def __init__(self, lines: list[str]) -> None:
        self.lines = list(lines)

    def prompt(self, message: str) -> str:
        if not self.lines:
            raise EOFError
        return self.lines.pop(0)


def test_format_todo() -> None:
    assert format_todo({"id": 3, "text": "Buy eggs", "done": False, "index": 2}) == "[ ] 3: Buy eggs"
    assert format_todo({"id": 1, "text": "Buy milk", "done": True, "index": 0}) == "[v] 1: Buy milk"


def test_create_posts_envelope(capsys) -> None:
    server = FakeServer()

    code = main(["--url", "http://todoapp", "create", "Buy milk"], transport=server.transport)

    assert code == 0
    assert json.loads(server.requests[0].content) == {"todo": {"text": "Buy milk"}}
    assert capsys.readouterr().out == "[ ] 1: Buy milk\n"


def test_list_empty_prints_no_todo(capsys) -> None:
    code = main(["list"], transport=FakeServer().transport)

    assert code == 0
    assert capsys.readouterr().out == "No todo\n"


def test_list_prints_each_todo(capsys) -> None:
    server = FakeServer(
        [
            {"id": 1, "text": "Buy milk", "done": True, "index": 0},
            {"id": 3, "text": "Buy eggs", "done": False, "index": 1},
        ]
    )

    main(["list"], transport=server.transport)

    assert capsys.readouterr().out == "[v] 1: Buy milk\n[ ] 3: Buy eggs\n"


def test_done_puts_done_flag(capsys) -> None:
    server = FakeServer()

    main(["done", "1"], transport=server.transport)

    request = server.requests[0]
    assert (request.method, request.url.path) == ("PUT", "/todo/1")
    assert json.loads(request.content) == {"todo": {"done": True}}
    assert capsys.readouterr().out == "[v] 1: Buy milk\n"


def test_done_unknown_id_exits_1(capsys) -> None:
    code = main(["done", "99"], transport=FakeServer().transport)

    captured = capsys.readouterr()
    assert code == 1
    assert captured.err == "Todo not found\n"


def test_delete_prints_ok(capsys) -> None:
    server = FakeServer()

    main(["delete", "2"], transport=server.transport)

    assert server.requests[0].url.path == "/todo/2"
    assert capsys.readouterr().out == "Ok\n"


def test_url_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("TODOAPP_URL", "http://localhost:8000")

    args = build_parser().parse_args(["list"])

    assert args.url == "http://localhost:8000"


def test_shell_runs_commands_until_quit(capsys) -> None:
    server = FakeServer()
    with httpx.Client(base_url="http://todoapp", transport=server.transport) as http:
        from todoapp.cli import TodoClient

        session = ScriptedSession(["create 'Buy milk'", "", "bogus", "done 99", "quit", "list"])
        run_shell(TodoClient(http), build_parser(), session=session)

    captured = capsys.readouterr()
    assert captured.out == "[ ] 1: Buy milk\n"
    assert "Todo not found" in captured.err
    # quit 之后的 list 不再执行
    assert [r.method for r in server.requests] == ["POST", "PUT"]
