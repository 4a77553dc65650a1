"""Main module entrypoint for local runtime execution.

This module validates startup configuration and either launches the FastAPI
service or runs one workflow orchestration from the command line.
"""

import argparse
import json
import logging

import uvicorn

from workflow_relay.bootstrap import bootstrap_create_application, bootstrap_create_execution_service
from workflow_relay.config import config_load_settings


def main() -> None:
    """Run selected runtime command with validated startup configuration.

    Returns:
        None: This function does not return a runtime value.

    Raises:
        SettingsLoadError: Raised when configuration validation fails.
        SystemExit: Raised with code 1 when a CLI command does not succeed.
    """

    argument_parser = argparse.ArgumentParser(description="Workflow relay runtime entrypoint")
    argument_parser.add_argument(
        "command",
        nargs="?",
        default="api",
        choices=("api", "execute", "result"),
        help="Runtime command: `api` starts server, `execute` runs one workflow and waits, "
        "`result` queries one execution status",
        type=str,
    )
    argument_parser.add_argument("--workflow-id", dest="workflow_id", type=str, help="Workflow id override")
    argument_parser.add_argument("--execute-id", dest="execute_id", type=str, help="Execution id for `result`")
    argument_parser.add_argument(
        "--parameters",
        dest="parameters",
        type=str,
        default="{}",
        help="Workflow parameters as a JSON object for `execute`",
    )
    argument_parser.add_argument(
        "--max-wait-seconds",
        dest="max_wait_seconds",
        type=float,
        help="Wait budget override for `execute`",
    )
    argument_parser.add_argument("--async", dest="is_async", action="store_true", help="Request async execution")
    parsed_arguments = argument_parser.parse_args()

    settings = config_load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if parsed_arguments.command == "execute":
        workflow_id = (parsed_arguments.workflow_id or settings.workflow_default_id or "").strip()
        if not workflow_id or not settings.workflow_api_token:
            argument_parser.error("`execute` requires --workflow-id (or WORKFLOW_DEFAULT_ID) and WORKFLOW_API_TOKEN")
        try:
            parameters = json.loads(parsed_arguments.parameters)
        except ValueError as error:
            argument_parser.error(f"--parameters is not valid JSON: {error}")
        if not isinstance(parameters, dict):
            argument_parser.error("--parameters must be a JSON object")
        execution_service = bootstrap_create_execution_service(settings)
        outcome = execution_service.job_execute_and_wait(
            target_id=workflow_id,
            parameters=parameters,
            credential=settings.workflow_api_token,
            max_wait_seconds=parsed_arguments.max_wait_seconds
            if parsed_arguments.max_wait_seconds is not None
            else settings.workflow_default_max_wait_seconds,
            execute_asynchronously=parsed_arguments.is_async,
        )
        print(json.dumps(outcome.outcome_to_payload(), ensure_ascii=False, indent=2))
        if not outcome.succeeded:
            raise SystemExit(1)
        return

    if parsed_arguments.command == "result":
        if not parsed_arguments.execute_id or not settings.workflow_api_token:
            argument_parser.error("`result` requires --execute-id and WORKFLOW_API_TOKEN")
        execution_service = bootstrap_create_execution_service(settings)
        snapshot = execution_service.job_read_status(
            handle=parsed_arguments.execute_id,
            credential=settings.workflow_api_token,
        )
        print(
            json.dumps(
                {
                    "execute_id": snapshot.handle,
                    "status": snapshot.status.value,
                    "raw_status": snapshot.raw_status,
                    "output": snapshot.normalized_output,
                    "error": snapshot.error_message,
                    "debug_url": snapshot.debug_url,
                },
                ensure_ascii=False,
                indent=2,
            )
        )
        return

    application = bootstrap_create_application(settings)
    uvicorn.run(
        application,
        host=settings.application_host,
        port=settings.application_port,
    )


if __name__ == "__main__":
    main()
