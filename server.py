from dotenv import load_dotenv
from core.logging_config import setup_logging
from core.cache import ResultCache
from core.config import get_api_url, get_server_settings, get_user_agent
from core.envelope import INJECTED_PARAMS, is_error
from core.fetcher import RoadmapFetcher
from core.metrics import ToolMetrics
from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError
from mcp.server.fastmcp.resources import TextResource
from pydantic import create_model
from starlette.requests import Request
from starlette.responses import JSONResponse
from pathlib import Path
from importlib import import_module
import pkgutil
import inspect
import json
import sys
import time
from typing import Any, Dict, List, Tuple

load_dotenv()

logger = setup_logging()

logger.info("MCP server bootstrap starting.")

settings = get_server_settings()

###################################################### Shared state ######################################################

# One cache and one fetcher per process; every tool call goes through them
cache = ResultCache()
fetcher = RoadmapFetcher(get_api_url("roadmap"), cache, user_agent=get_user_agent())
metrics = ToolMetrics()
logger.info("Roadmap API endpoint: %s", fetcher.base_url)

###################################################### MCP Resources ######################################################

logger.info("Loading MCP resources...")
resources_dir = (Path(__file__).resolve().parent / "resources").resolve()

resource_files: List[Tuple[Path, str]] = []
resource_map: Dict[str, str] = {}

if resources_dir.is_dir():
    for file_path in sorted(resources_dir.iterdir()):
        if file_path.is_file():
            content = file_path.read_text(encoding="utf-8")
            resource_files.append((file_path, content))
            resource_map[file_path.stem.lower()] = content
    logger.info(f"Total resources discovered: {len(resource_files)}, resource names: {list(resource_map.keys())}")

instr = resource_map.get("assistant_instructions")

try:
    mcp = FastMCP(
        settings["name"],
        instructions=instr,
        host=settings["host"],
        port=settings["port"],
        stateless_http=True,
        json_response=True,
    )
    logger.info("MCP server instance created with instructions: %s", bool(instr))
except Exception:
    logger.exception("Failed to create FastMCP instance")
    raise

for file_path, content in resource_files:
    try:
        resource = TextResource(
            uri=f"resource://{file_path.stem.replace(' ', '_')}",
            name=file_path.stem,
            text=content,
            description=f"Contents of {file_path.name}",
            mime_type="text/markdown",
        )
        mcp.add_resource(resource)
    except Exception:
        logger.exception(f"Failed to add resource {file_path}")
logger.info(f"Total resources loaded into MCP: {len(resource_files)}")

###################################################### MCP Tools ######################################################

logger.info("Loading MCP tools...")


def caller_params(_func) -> List[inspect.Parameter]:
    """The handler's parameters minus the one injected by the server."""
    params = list(inspect.signature(_func).parameters.values())
    if params and params[0].name in INJECTED_PARAMS:
        return params[1:]
    return params


def input_schema(tool_name, _func) -> dict:
    """JSON schema advertised to clients, with the handler's bounds and enums."""
    fields = {
        p.name: (p.annotation, ... if p.default is inspect.Parameter.empty else p.default)
        for p in caller_params(_func)
    }
    return create_model(f"{tool_name}Arguments", **fields).model_json_schema()


def make_wrapper(tool_name, _func):
    """Wrap a handler for FastMCP: inject the fetcher, count the call, flag error envelopes.

    Wrapper parameters keep the handler's names and defaults but are typed Any,
    so FastMCP passes arguments through untouched and the handler's own
    validation produces the ValidationError envelope.
    """
    wrapper_params = [p.replace(annotation=Any) for p in caller_params(_func)]
    inject_fetcher = len(wrapper_params) < len(inspect.signature(_func).parameters)

    async def _wrapped(**call_kwargs):
        started = time.perf_counter()
        if inject_fetcher:
            result = await _func(fetcher, **call_kwargs)
        else:
            result = await _func(**call_kwargs)
        failed = is_error(result)
        metrics.record(tool_name, failed)
        logger.info(
            "Tool %s %s in %.1f ms", tool_name, "failed" if failed else "succeeded",
            (time.perf_counter() - started) * 1000,
        )
        if failed:
            raise ToolError(json.dumps(result, indent=2, default=str))
        return result

    _wrapped.__signature__ = inspect.Signature(parameters=wrapper_params)
    _wrapped.__name__ = tool_name
    _wrapped.__doc__ = _func.__doc__
    return _wrapped


TOOLS_PACKAGE = "tools"
tools_path = Path(__file__).resolve().parent / TOOLS_PACKAGE
registered_tool_names: list[str] = []
if tools_path.is_dir():
    for finder, name, ispkg in pkgutil.iter_modules([str(tools_path)]):
        if name.startswith("_"):
            continue
        module_name = f"{TOOLS_PACKAGE}.{name}"
        try:
            mod = import_module(module_name)
            logger.info(f"Imported tools module: {module_name}")
        except Exception:
            logger.exception(f"Failed to load tools from module {module_name}")
            continue
        if not hasattr(mod, "get_tools"):
            continue
        for tool_name, meta in mod.get_tools().items():
            func = meta.get("func") if isinstance(meta, dict) else meta
            if not func:
                logger.warning(f"Tool {tool_name} in {module_name} did not provide a callable; skipping")
                continue
            title = meta.get("title") if isinstance(meta, dict) else None
            description = meta.get("description") if isinstance(meta, dict) else None
            try:
                mcp.add_tool(make_wrapper(tool_name, func), name=tool_name, title=title, description=description)
                # advertise the constrained schema; FastMCP only validates the Any-typed wrapper
                mcp._tool_manager.get_tool(tool_name).parameters = input_schema(tool_name, func)
                logger.info(f"Added tool via add_tool: {tool_name} (title={title}) from {module_name}")
                registered_tool_names.append(tool_name)
            except Exception:
                logger.exception(f"Failed to register tool {tool_name} from {module_name}")
    logger.info(f"Total tools registered: {len(registered_tool_names)} , tool names: {registered_tool_names}")

###################################################### Operational routes ######################################################


@mcp.custom_route("/health", methods=["GET"])
async def health(request: Request) -> JSONResponse:
    return JSONResponse({
        "status": "healthy",
        "server": settings["name"],
        "uptimeSeconds": metrics.uptime(),
        "cacheSize": len(cache),
    })


@mcp.custom_route("/metrics", methods=["GET"])
async def tool_metrics(request: Request) -> JSONResponse:
    return JSONResponse({
        "uptimeSeconds": metrics.uptime(),
        "tools": metrics.snapshot(),
        "cacheSize": len(cache),
    })


@mcp.custom_route("/cache", methods=["GET"])
async def cache_stats(request: Request) -> JSONResponse:
    return JSONResponse(cache.stats())


@mcp.custom_route("/cache", methods=["DELETE"])
async def clear_cache(request: Request) -> JSONResponse:
    return JSONResponse({"cleared": cache.clear()})


###################################################### Startup ######################################################

if __name__ == "__main__":
    logger.info(f"Starting MCP server on http://{settings['host']}:{settings['port']}/mcp")
    try:
        mcp.run(transport="streamable-http")
        logger.info("MCP server shut down.")
    except Exception:
        logger.exception("Unhandled exception running MCP server")
        print("Unhandled exception occurred. See logs/ for details.", file=sys.stderr)
        sys.exit(-1)
