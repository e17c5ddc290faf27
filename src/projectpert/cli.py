import argparse
import json
import logging
import sys
from dataclasses import replace

from .config import configure_logging, get_config
from .data_loader import load_request, schedule_frame
from .errors import ScheduleError
from .graph import to_mermaid
from .kpis import compute_kpis
from .service import ScheduleService, error_response

logger = logging.getLogger(__name__)


def cmd_compute(service, args):
    request = load_request(args.path, default_t0=service.config.default_t0)
    if args.t0 is not None:
        request['t0'] = args.t0
    result, project_id = service.run(request, save=args.save)
    if args.format == 'json':
        print(json.dumps({'project_id': project_id, **result.to_dict()}, indent=2))
    elif args.format == 'table':
        print(schedule_frame(result).to_string(index=False))
    elif args.format == 'mermaid':
        print(to_mermaid(result), end='')
    else:
        k = compute_kpis(result); print('# Summary'); print(json.dumps(k, indent=2))
    if project_id:
        print(f'# Saved as {project_id}', file=sys.stderr)


def cmd_projects(service, args):
    if args.action == 'list':
        print(json.dumps(service.list_projects(), indent=2))
    elif args.action == 'show':
        print(json.dumps(service.get_project(args.project_id), indent=2, ensure_ascii=False))
    else:
        service.delete_project(args.project_id); print(f'Deleted {args.project_id}')


def build_parser():
    ap = argparse.ArgumentParser(prog='projectpert', description='CPM/PERT project scheduler')
    ap.add_argument('--log-level', default=None, help='override PP_LOG_LEVEL')
    ap.add_argument('--project-dir', default=None, help='override PP_PROJECT_DIR')
    sub = ap.add_subparsers(dest='command', required=True)

    c = sub.add_parser('compute', help='schedule tasks from a .json, .csv or .xlsx file')
    c.add_argument('path')
    c.add_argument('--t0', type=int, default=None, help='project start offset (default 1)')
    c.add_argument('--format', choices=['summary', 'json', 'table', 'mermaid'], default='summary')
    c.add_argument('--save', action='store_true', help='store a project snapshot')
    c.add_argument('--strict-edges', action='store_true',
                   help='only mark edges critical when EF(pred) + 1 == ES(succ)')
    c.set_defaults(func=cmd_compute)

    p = sub.add_parser('projects', help='list, show or delete saved projects')
    p.add_argument('action', choices=['list', 'show', 'delete'])
    p.add_argument('project_id', nargs='?')
    p.set_defaults(func=cmd_projects)
    return ap


def main(argv=None):
    ap = build_parser(); args = ap.parse_args(argv)
    if args.command == 'projects' and args.action != 'list' and not args.project_id:
        ap.error(f'projects {args.action} needs a project id')
    overrides = {}
    if args.project_dir:
        overrides['project_dir'] = args.project_dir
    if getattr(args, 'strict_edges', False):
        overrides['strict_critical_edges'] = True
    config = replace(get_config(), **overrides)
    configure_logging(args.log_level or config.log_level)
    service = ScheduleService(config)
    try:
        args.func(service, args)
    except ScheduleError as e:
        logger.error('%s', e)
        print(json.dumps(error_response(e), indent=2))
        return 2
    except (OSError, ValueError) as e:
        logger.error('cannot read input: %s', e)
        return 1
    return 0


if __name__ == '__main__': sys.exit(main())
