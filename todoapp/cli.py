"""
命令行客户端：通过 HTTP 接口操作 Todo 列表

运行方式：
    todoapp create "Buy milk"
    todoapp list
    todoapp done 1
    todoapp delete 1
    todoapp shell            # 交互模式，支持同样的命令，quit / Ctrl-D 退出

服务地址：--url 参数 > TODOAPP_URL 环境变量 > http://todoapp
"""

import argparse
import os
import shlex
import sys

import httpx
from prompt_toolkit import PromptSession

DEFAULT_URL = "http://todoapp"
TIMEOUT = 10.0


class TodoClientError(Exception):
    """服务端返回非 2xx"""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class TodoClient:
    """/todo 接口的同步客户端"""

    def __init__(self, http: httpx.Client):
        self._http = http

    def _send(self, method: str, path: str, json: dict | None = None) -> httpx.Response:
        response = self._http.request(method, path, json=json)
        if response.is_error:
            raise TodoClientError(response.status_code, response.text or response.reason_phrase)
        return response

    def create(self, text: str) -> dict:
        return self._send("POST", "/todo", {"todo": {"text": text}}).json()["todo"]

    def list(self) -> list[dict]:
        return self._send("GET", "/todo").json()["todo"]

    def done(self, todo_id: int) -> dict:
        return self._send("PUT", f"/todo/{todo_id}", {"todo": {"done": True}}).json()["todo"]

    def delete(self, todo_id: int) -> None:
        self._send("DELETE", f"/todo/{todo_id}")


def format_todo(todo: dict) -> str:
    mark = "v" if todo["done"] else " "
    return f"[{mark}] {todo['id']}: {todo['text']}"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="todoapp", description="Todo 列表命令行客户端")
    parser.add_argument(
        "--url",
        default=os.environ.get("TODOAPP_URL", DEFAULT_URL),
        help="服务地址（默认读取 TODOAPP_URL）",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    create = commands.add_parser("create", help="新建 Todo")
    create.add_argument("text")

    commands.add_parser("list", help="列出 Todo")

    done = commands.add_parser("done", help="标记完成")
    done.add_argument("id", type=int)

    delete = commands.add_parser("delete", help="删除 Todo")
    delete.add_argument("id", type=int)

    commands.add_parser("shell", help="交互模式")
    return parser


def execute(client: TodoClient, args: argparse.Namespace) -> None:
    """执行单条命令并打印结果"""
    if args.command == "create":
        print(format_todo(client.create(args.text)))
    elif args.command == "list":
        todos = client.list()
        if not todos:
            print("No todo")
        for todo in todos:
            print(format_todo(todo))
    elif args.command == "done":
        print(format_todo(client.done(args.id)))
    elif args.command == "delete":
        client.delete(args.id)
        print("Ok")


def run_shell(client: TodoClient, parser: argparse.ArgumentParser, session=None) -> None:
    """交互循环：每行按命令行语法解析，出错只提示不退出"""
    session = session or PromptSession()
    while True:
        try:
            line = session.prompt("todo> ").strip()
        except (EOFError, KeyboardInterrupt):
            break
        if not line:
            continue
        if line in ("quit", "exit"):
            break
        try:
            args = parser.parse_args(shlex.split(line))
        except SystemExit:
            # argparse 已把用法错误打到 stderr
            continue
        if args.command == "shell":
            continue
        try:
            execute(client, args)
        except TodoClientError as e:
            print(e.message, file=sys.stderr)
        except httpx.HTTPError as e:
            print(f"请求失败: {e}", file=sys.stderr)


def main(argv: list[str] | None = None, transport: httpx.BaseTransport | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    with httpx.Client(base_url=args.url, timeout=TIMEOUT, transport=transport) as http:
        client = TodoClient(http)
        if args.command == "shell":
            run_shell(client, parser)
            return 0
        try:
            execute(client, args)
        except TodoClientError as e:
            print(e.message, file=sys.stderr)
            return 1
        except httpx.HTTPError as e:
            print(f"请求失败: {e}", file=sys.stderr)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
