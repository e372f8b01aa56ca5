#!/usr/bin/env python3
"""
HA Release - Main Entry Point

Rolling release of an AWS autoscaling group: every instance is replaced by
a freshly launched one, one at a time, gated on load balancer health.
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from core.exceptions import ConfigurationError, ReleaseError
from core.models.release import ReleaseResult
from core.orchestration.release_controller import ReleaseController
from core.services.config_service import ConfigService
from core.utils.logger import configure_logging
from infrastructure.aws.autoscaling_client import AutoScalingClient
from infrastructure.aws.elb_client import LoadBalancerClient
from infrastructure.aws.session_manager import AWSSessionManager


def log_summary(logger: logging.Logger, result: Optional[ReleaseResult]) -> None:
    """Log what the release did, for the operator."""
    if result is None:
        return

    logger.info(f"Release ID: {result.release_id}")
    logger.info(f"Status: {result.status.value} (state: {result.state.value})")
    logger.info(f"Cycled instances: {', '.join(result.cycled_instances) or 'none'}")
    if result.skipped_instances:
        logger.info(f"Skipped instances: {', '.join(result.skipped_instances)}")
    logger.info(
        f"Capacity updates: {', '.join(str(u) for u in result.capacity_updates) or 'none'}"
    )
    for failure in result.deregistration_failures:
        logger.error(f"Deregistration failure: {failure}")
    if result.duration is not None:
        logger.info(f"Duration: {result.duration}")


async def run_release(args: argparse.Namespace) -> bool:
    """Load configuration, build the collaborators and run one release."""
    logger = logging.getLogger(__name__)

    config_service = ConfigService()
    release_config = await config_service.load_release_config(
        args.config,
        overrides={
            "group_name": args.group,
            "aws.region": args.region,
            "aws.access_key_id": args.access_key,
            "aws.secret_access_key": args.secret_key,
            "aws.profile_name": args.profile,
            "inservice_time_allowed": args.inservice_time_allowed,
            "elb_timeout": args.elb_timeout,
            "log_level": "DEBUG" if args.verbose else None,
        },
    )

    configure_logging(release_config.log_level.value, args.log_file)
    logger.info(f"Starting rolling release of {release_config.group_name}")

    session_manager = AWSSessionManager(release_config.aws)
    controller = await ReleaseController.create(
        release_config,
        AutoScalingClient(session_manager),
        LoadBalancerClient(session_manager),
    )

    try:
        result = await controller.execute()
    except Exception:
        log_summary(logger, controller.last_result)
        raise

    log_summary(logger, result)
    return result.is_successful


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description='HA Release - rolling instance replacement for an autoscaling group',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Release a group with credentials from the environment
  ha-release --group web-asg --region eu-west-1

  # Allow ten minutes for each new instance and poll every 15 seconds
  ha-release -a web-asg -t 600 -e 15

  # Use a configuration file
  ha-release --config config/default.yml
        """
    )

    parser.add_argument(
        '--group', '-a',
        help='Name of the autoscaling group to release'
    )
    parser.add_argument(
        '--config',
        help='Path to a YAML configuration file'
    )

    # AWS options
    parser.add_argument('--region', '-r', help='AWS region of the group')
    parser.add_argument('--access-key', '-o', help='AWS access key ID')
    parser.add_argument('--secret-key', '-s', help='AWS secret access key')
    parser.add_argument('--profile', help='AWS shared credentials profile')

    # Timing options
    parser.add_argument(
        '--inservice-time-allowed', '-t',
        type=int,
        help='Seconds to wait for new instances to come InService (default: 300)'
    )
    parser.add_argument(
        '--elb-timeout', '-e',
        type=int,
        help='Seconds between health polls and before scale-down (default: 10)'
    )

    # Output options
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose logging'
    )
    parser.add_argument(
        '--log-file',
        help='Also write logs to logs/<LOG_FILE>'
    )

    return parser.parse_args(argv)


async def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_arguments(argv)
    logger = logging.getLogger(__name__)

    try:
        success = await run_release(args)
        return 0 if success else 1

    except ConfigurationError as e:
        print(f"Configuration error: {str(e)}", file=sys.stderr)
        return 2
    except ReleaseError as e:
        logger.error(f"Release failed: {str(e)}")
        return 1
    except KeyboardInterrupt:
        print("\nOperation cancelled by user")
        return 1
    except Exception as e:
        logger.error(f"Unexpected error: {str(e)}")
        return 1


def cli() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == '__main__':
    cli()
