"""
CLI 模块

命令行接口实现。
"""

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import click
from loguru import logger

from packweave import __version__, storage
from packweave.exceptions import PackweaveError
from packweave.logger import setup_logger
from packweave.models import Exclude, Include, Modpack
from packweave.orchestrator import BranchUpdater
from packweave.packager import MrpackBuilder
from packweave.services import ModrinthClient, MrpackImporter
from packweave.settings import Settings, load_settings


@dataclass
class CliContext:
    directory: Path
    settings: Settings


def format_error(error: PackweaveError) -> str:
    _, tip = error.message_and_tip()
    return f"{error}\n提示: {tip}"


def run(coro):
    """运行协程，把类型化错误转换为 click 错误"""
    try:
        return asyncio.run(coro)
    except PackweaveError as e:
        logger.debug(f"错误详情: {e.to_dict()}")
        raise click.ClickException(format_error(e))


async def _mutate_modpack(directory: Path, action) -> Modpack:
    """读取整合包，执行修改并保存"""
    modpack = await storage.load_modpack(directory)
    action(modpack)
    await storage.save_modpack(modpack)
    return modpack


pass_context = click.make_pass_decorator(CliContext)


@click.group()
@click.option(
    "-d",
    "--directory",
    type=click.Path(file_okay=False, path_type=Path),
    default=".",
    help="整合包目录",
)
@click.option("--settings", "settings_path", type=click.Path(exists=True), help="设置文件路径")
@click.option("--debug", is_flag=True, help="启用调试模式")
@click.version_option(version=__version__)
@click.pass_context
def main(ctx: click.Context, directory: Path, settings_path: Optional[str], debug: bool):
    """Packweave - Modrinth 多分支整合包管理工具"""
    try:
        settings = load_settings(settings_path, directory)
    except PackweaveError as e:
        raise click.ClickException(format_error(e))

    # 相对路径的日志文件位于整合包目录
    log_file = directory / settings.log.file if settings.log.file else None
    setup_logger(level="DEBUG" if debug else settings.log.level, log_file=log_file)
    ctx.obj = CliContext(directory=directory, settings=settings)


@main.command()
@click.option("-f", "--force", is_flag=True, help="覆盖已有的 modpack.json")
@pass_context
def init(obj: CliContext, force: bool):
    """初始化整合包"""
    run(storage.init_modpack(obj.directory, force))
    click.echo(f"已在 {obj.directory} 初始化整合包")


@main.command()
@click.argument("branches", nargs=-1)
@click.option("--no-alpha", is_flag=True, help="不使用 alpha 版本")
@click.option("--no-beta", is_flag=True, help="不使用 beta 版本")
@click.option("-r", "--require-all", is_flag=True, help="所有文件在客户端与服务端都标记为 required")
@click.option("-a", "--auto-dependencies", is_flag=True, help="自动添加缺失的必需依赖")
@pass_context
def update(
    obj: CliContext,
    branches: tuple,
    no_alpha: bool,
    no_beta: bool,
    require_all: bool,
    auto_dependencies: bool,
):
    """解析项目并更新分支文件清单"""

    async def _update():
        modpack = await storage.load_modpack(obj.directory)
        # 命令行开关只作用于本次运行，不写回 modpack.json
        modpack.require_all = modpack.require_all or require_all
        modpack.auto_dependencies = modpack.auto_dependencies or auto_dependencies
        async with ModrinthClient(obj.settings.api) as client:
            updater = BranchUpdater(
                modpack,
                client,
                no_alpha=no_alpha or obj.settings.update.no_alpha,
                no_beta=no_beta or obj.settings.update.no_beta,
            )
            return await updater.run(list(branches) or None)

    summary = run(_update())

    for report in summary.reports:
        click.echo(
            f"{report.branch}: {len(report.added)} 个项目, "
            f"{len(report.dependencies)} 个依赖, {len(report.manual)} 个手动文件"
        )
        for project in report.not_found:
            click.echo(f"  未找到可用版本: {project}")
        for project, error in report.failed:
            click.echo(f"  失败: {project}: {error}")

    if not summary.ok:
        lines = [f"{branch}: {format_error(e)}" for branch, e in summary.errors.items()]
        raise click.ClickException("部分分支更新失败\n" + "\n".join(lines))


@main.command()
@click.argument("branch")
@click.option(
    "-o", "--output", type=click.Path(dir_okay=False, path_type=Path), help="输出文件路径"
)
@pass_context
def export(obj: CliContext, branch: str, output: Optional[Path]):
    """导出分支为 .mrpack"""

    async def _export():
        modpack = await storage.load_modpack(obj.directory)
        return await MrpackBuilder().build(modpack, branch, output)

    path = run(_export())
    click.echo(f"已导出: {path}")


@main.command("import")
@click.argument("mrpack", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-p", "--add-projects", is_flag=True, help="把识别出的项目加入整合包")
@click.option("-f", "--force", is_flag=True, help="覆盖同名分支")
@pass_context
def import_(obj: CliContext, mrpack: Path, add_projects: bool, force: bool):
    """从 .mrpack 导入分支"""

    async def _import():
        modpack = await storage.load_modpack(obj.directory)
        async with ModrinthClient(obj.settings.api) as client:
            importer = MrpackImporter(client)
            return await importer.import_mrpack(
                modpack, mrpack, add_projects=add_projects, force=force
            )

    report = run(_import())
    click.echo(f"已导入分支 {report.branch}: {len(report.imported)} 个项目")
    for path in report.unresolved:
        click.echo(f"  未识别: {path}")


@main.group()
def branch():
    """管理分支"""


@branch.command("add")
@click.argument("names", nargs=-1, required=True)
@pass_context
def branch_add(obj: CliContext, names: tuple):
    async def _add():
        modpack = await storage.load_modpack(obj.directory)
        for name in names:
            await storage.create_branch(modpack, name)
        await storage.save_modpack(modpack)

    run(_add())


@branch.command("rm")
@click.argument("names", nargs=-1, required=True)
@pass_context
def branch_rm(obj: CliContext, names: tuple):
    run(_mutate_modpack(obj.directory, lambda m: storage.remove_branches(m, list(names))))


@branch.command("ls")
@pass_context
def branch_ls(obj: CliContext):
    modpack = run(storage.load_modpack(obj.directory))
    for name in modpack.branches:
        click.echo(name)


@main.group()
def project():
    """管理项目"""


@project.command("add")
@click.argument("ids", nargs=-1, required=True)
@click.option("-i", "--include", "include", multiple=True, help="只在这些分支中使用")
@click.option("-e", "--exclude", "exclude", multiple=True, help="在这些分支中不使用")
@pass_context
def project_add(obj: CliContext, ids: tuple, include: tuple, exclude: tuple):
    """添加项目（Modrinth ID 或 slug）"""
    if include and exclude:
        raise click.UsageError("--include 与 --exclude 不能同时使用")

    include_or_exclude = None
    if include:
        include_or_exclude = Include(include)
    elif exclude:
        include_or_exclude = Exclude(exclude)

    run(
        _mutate_modpack(
            obj.directory,
            lambda m: m.add_projects(list(ids), include_or_exclude=include_or_exclude),
        )
    )


@project.command("rm")
@click.argument("ids", nargs=-1, required=True)
@pass_context
def project_rm(obj: CliContext, ids: tuple):
    run(_mutate_modpack(obj.directory, lambda m: m.remove_projects(list(ids))))


@project.command("ls")
@pass_context
def project_ls(obj: CliContext):
    modpack = run(storage.load_modpack(obj.directory))
    for name, settings in modpack.projects.items():
        details = []
        if settings.version_overrides:
            overrides = ", ".join(f"{b}={v}" for b, v in settings.version_overrides.items())
            details.append(f"覆盖: {overrides}")
        if isinstance(settings.include_or_exclude, Include):
            details.append(f"包含: {', '.join(settings.include_or_exclude.branches)}")
        elif isinstance(settings.include_or_exclude, Exclude):
            details.append(f"排除: {', '.join(settings.include_or_exclude.branches)}")
        click.echo(f"{name} ({'; '.join(details)})" if details else name)


@project.group()
def override():
    """管理版本覆盖"""


@override.command("add")
@click.argument("project_id")
@click.argument("branch_name")
@click.argument("version_id")
@pass_context
def override_add(obj: CliContext, project_id: str, branch_name: str, version_id: str):
    run(
        _mutate_modpack(
            obj.directory,
            lambda m: m.add_version_override(project_id, branch_name, version_id),
        )
    )


@override.command("rm")
@click.argument("project_id")
@click.argument("branch_name", required=False)
@pass_context
def override_rm(obj: CliContext, project_id: str, branch_name: Optional[str]):
    """移除版本覆盖，未指定分支时移除全部"""

    def _remove(modpack: Modpack):
        if branch_name is None:
            modpack.remove_all_version_overrides(project_id)
        else:
            modpack.remove_version_override(project_id, branch_name)

    run(_mutate_modpack(obj.directory, _remove))


@project.group()
def include():
    """管理包含列表"""


@include.command("add")
@click.argument("project_id")
@click.argument("branches", nargs=-1, required=True)
@pass_context
def include_add(obj: CliContext, project_id: str, branches: tuple):
    run(
        _mutate_modpack(
            obj.directory, lambda m: m.add_project_inclusions(project_id, list(branches))
        )
    )


@include.command("rm")
@click.argument("project_id")
@click.argument("branches", nargs=-1)
@pass_context
def include_rm(obj: CliContext, project_id: str, branches: tuple):
    """移除包含的分支，未指定分支时移除整个列表"""

    def _remove(modpack: Modpack):
        if branches:
            modpack.remove_project_inclusions(project_id, list(branches))
        else:
            modpack.remove_all_project_inclusions(project_id)

    run(_mutate_modpack(obj.directory, _remove))


@project.group()
def exclude():
    """管理排除列表"""


@exclude.command("add")
@click.argument("project_id")
@click.argument("branches", nargs=-1, required=True)
@pass_context
def exclude_add(obj: CliContext, project_id: str, branches: tuple):
    run(
        _mutate_modpack(
            obj.directory, lambda m: m.add_project_exclusions(project_id, list(branches))
        )
    )


@exclude.command("rm")
@click.argument("project_id")
@click.argument("branches", nargs=-1)
@pass_context
def exclude_rm(obj: CliContext, project_id: str, branches: tuple):
    """移除排除的分支，未指定分支时移除整个列表"""

    def _remove(modpack: Modpack):
        if branches:
            modpack.remove_project_exclusions(project_id, list(branches))
        else:
            modpack.remove_all_project_exclusions(project_id)

    run(_mutate_modpack(obj.directory, _remove))


if __name__ == "__main__":
    main()
