"""CLI 入口模块 -- python -m taskdeck <command> --user <user_id> [...]

支持的命令：
  list   [--query Q] [--filter all|completed|pending|priority]  列出任务
  stats                                                      任务统计
  add    <title> [--note N] [--priority P] [--category C]    新建任务
  done   <task_id>                                           标记完成并保存
  rm     <task_id>                                           删除任务
"""

import asyncio
import sys

from .config import load_engine_config
from .exceptions import TaskError
from .logging_config import setup_logging
from .models import Task
from .service import TaskEngine
from .session import SessionContext
from .store import create_store

COMMANDS = ("list", "stats", "add", "done", "rm")


def _usage() -> None:
    print("用法: python -m taskdeck <command> --user <user_id> [options]")
    print("命令:")
    print("  list   [--query Q] [--filter all|completed|pending|priority]")
    print("  stats")
    print("  add    <title> [--note N] [--priority high|medium|low|normal] [--category C]")
    print("  done   <task_id>")
    print("  rm     <task_id>")


def parse_args(argv: list[str]) -> tuple[str, list[str], dict[str, str]]:
    """解析命令、位置参数与 --key value 选项

    Raises:
        ValueError: 选项缺少取值
    """
    command, rest = argv[0], argv[1:]
    positional: list[str] = []
    options: dict[str, str] = {}
    i = 0
    while i < len(rest):
        arg = rest[i]
        if arg.startswith("--"):
            if i + 1 >= len(rest):
                raise ValueError(f"选项缺少取值: {arg}")
            options[arg[2:]] = rest[i + 1]
            i += 2
        else:
            positional.append(arg)
            i += 1
    return command, positional, options


def _format_task(task: Task) -> str:
    mark = "x" if task.completed else " "
    category = f" #{task.category}" if task.category else ""
    return f"[{mark}] {task.id}  {task.title}  ({task.priority} priority){category}"


async def run(command: str, positional: list[str], options: dict[str, str]) -> int:
    """执行命令，返回退出码"""
    config = load_engine_config()
    session = SessionContext(options.get("user") or None)
    store = await create_store(config.db_path)
    engine = TaskEngine.from_store(store, session, config)

    try:
        await engine.refresh()

        if command == "list":
            tasks = engine.filter(options.get("query", ""), options.get("filter", "all"))
            if not tasks:
                print("没有匹配的任务")
            for task in tasks:
                print(_format_task(task))
        elif command == "stats":
            stats = engine.get_stats()
            print(
                f"{stats.completed}/{stats.total} tasks completed "
                f"({stats.completion_rate}%), "
                f"{stats.pending} pending, {stats.high_priority} high priority"
            )
        elif command == "add":
            task = await engine.create(
                " ".join(positional),
                note=options.get("note", ""),
                priority=options.get("priority", "normal"),
                category=options.get("category"),
            )
            print(_format_task(task))
        elif command in ("done", "rm"):
            if not positional:
                print(f"{command} 需要 task_id")
                return 1
            if command == "done":
                print(_format_task(await engine.edit(positional[0], completed=True)))
            else:
                await engine.delete(positional[0])
                print(f"已删除 {positional[0]}")
        return 0
    except TaskError as e:
        print(f"{e.kind}: {e}")
        return 1
    finally:
        engine.cache.close()
        await store.conn.close()


def main() -> None:
    """CLI 主入口"""
    if len(sys.argv) < 2 or sys.argv[1] not in COMMANDS:
        _usage()
        sys.exit(1)

    try:
        command, positional, options = parse_args(sys.argv[1:])
    except ValueError as e:
        print(e)
        sys.exit(1)

    setup_logging()
    sys.exit(asyncio.run(run(command, positional, options)))


if __name__ == "__main__":
    main()
