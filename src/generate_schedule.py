import os
import sys
import yaml
from league.errors import InvalidInput
from league.schedule import generate_schedule


def load_team_names(file_path):
    """Read team names from YAML: either a plain list or ``{'teams': [...]}``."""
    with open(file_path, mode='r', encoding='utf-8') as file:
        data = yaml.safe_load(file)
    if isinstance(data, dict):
        data = data.get('teams', [])
    if not data:
        return []
    return [str(name).strip() for name in data if str(name).strip()]


def format_schedule(schedule):
    lines = []
    for round_index, fixtures in enumerate(schedule):
        if lines:
            lines.append('')  # Blank line between rounds
        lines.append(f"# Round {round_index + 1}")
        for fixture in fixtures:
            lines.append(f"{fixture.id}: {fixture.home} vs {fixture.away}")
    return '\n'.join(lines)


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    script_dir = os.path.dirname(__file__)
    base_dir = os.path.dirname(script_dir)

    # Use command line argument if provided, otherwise use default path
    teams_file = argv[0] if argv else os.path.join(base_dir, 'data', 'teams.yaml')

    teams = load_team_names(teams_file)
    try:
        schedule = generate_schedule(teams)
    except InvalidInput as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    print(format_schedule(schedule))
    return 0


if __name__ == '__main__':
    sys.exit(main())
