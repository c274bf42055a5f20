from lambda_prune.errors import PruneError, SweepFailed
from lambda_prune.models.project import ServiceProject
from lambda_prune.models.report import to_dict
from lambda_prune.plugin import PrunePlugin
from lambda_prune.Keywords import Keywords
import json
import argparse
import logging
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


# run pip install -e .
# then do your thing
def _save_to_json(data, filename: str) -> bool:
    try:
        with open(filename, 'w') as f:
            json.dump(data, f, indent=2, default=str)
        return True
    except OSError as e:
        print(f"An error occured saving the prune report as json: {e}", file=sys.stderr)
        return False


def _options(args) -> dict:
    """Map parsed arguments onto the option names the plugin understands."""
    options = {
        'number': args.number,
        'stage': args.stage,
        'region': args.region,
        'profile': args.profile,
        'dryRun': args.dry_run,
        'verbose': args.verbose,
    }
    for name in ('function', 'layer'):
        if getattr(args, name, None):
            options[name] = getattr(args, name)
    if getattr(args, 'include_layers', False):
        options['includeLayers'] = True
    if getattr(args, 'no_deploy', False):
        options['noDeploy'] = True
    return options


def _run(args, event: str):
    try:
        project = ServiceProject.load(args.config, stage=args.stage, region=args.region)
        plugin = PrunePlugin(project, _options(args))
        reports = plugin.run_hook(event)
    except SweepFailed as e:
        if args.output:
            _save_to_json([to_dict(r) for r in e.reports], args.output)
        print(f"Prune failed: {e}", file=sys.stderr)
        sys.exit(1)
    except PruneError as e:
        print(f"Prune failed: {e}", file=sys.stderr)
        sys.exit(1)

    if args.output:
        _save_to_json([to_dict(r) for r in reports], args.output)
    return reports


def prune_versions(args):
    """
    delete old function (and optionally layer) versions
    """
    return _run(args, Keywords.PRUNE_EVENT.value)


def post_deploy(args):
    """
    automatic pruning, meant to run right after `deploy`
    """
    return _run(args, Keywords.POST_DEPLOY_EVENT.value)


def _add_common_arguments(parser):
    parser.add_argument(
        '--config',
        '-c',
        default='serverless.yml',
        help='Project file describing the service (default: serverless.yml)'
    )
    parser.add_argument('--stage', '-s', help='Stage of the service')
    parser.add_argument('--region', '-r', help='Region of the service')
    parser.add_argument('--profile', help='AWS profile to use')
    parser.add_argument(
        '--dry-run',
        '-d',
        action='store_true',
        help='Dry-run. Lists deletion candidates'
    )
    parser.add_argument(
        '--verbose',
        '-v',
        action='store_true',
        help='Log every deletion candidate and listing page'
    )
    parser.add_argument(
        '--output',
        '-o',
        help='Write the prune report to this json file'
    )


def main():
    parser = argparse.ArgumentParser(
        prog='lprune',
        description='Clean up deployed AWS Lambda functions and layers '
        'by deleting older published versions'
    )

    # since we're having different functions, use subparsers for each one
    subparsers = parser.add_subparsers(
        dest='command',
        help='Available commands'
    )

    prune_parser = subparsers.add_parser(
        'prune',
        help='Delete all but the N most recent versions'
    )
    prune_parser.add_argument(
        '--number',
        '-n',
        type=int,
        required=True,
        help='Number of previous versions to keep'
    )
    prune_parser.add_argument(
        '--function',
        '-f',
        help='Function name. Limits cleanup to the specified function'
    )
    prune_parser.add_argument(
        '--layer',
        '-l',
        help='Layer name. Limits cleanup to the specified Lambda layer'
    )
    prune_parser.add_argument(
        '--include-layers',
        '-i',
        action='store_true',
        help='Includes the pruning of Lambda layers'
    )
    _add_common_arguments(prune_parser)
    prune_parser.set_defaults(func=prune_versions)

    deploy_parser = subparsers.add_parser(
        'post-deploy',
        help='Prune automatically when custom.prune.automatic is set'
    )
    deploy_parser.add_argument(
        '--number',
        '-n',
        type=int,
        help='Overrides custom.prune.number'
    )
    deploy_parser.add_argument(
        '--no-deploy',
        action='store_true',
        help='The deployment only packaged the service, skip pruning'
    )
    _add_common_arguments(deploy_parser)
    deploy_parser.set_defaults(func=post_deploy)

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if getattr(args, 'verbose', False) else logging.INFO,
        format=LOG_FORMAT
    )
    # boto is chatty at DEBUG
    logging.getLogger('botocore').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)

    # execute the passed function
    args.func(args)


if __name__ == '__main__':
    main()
