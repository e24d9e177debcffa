"""
Round-robin schedule generation.
"""
from typing import List

from .errors import InvalidInput
from .models import Fixture

BYE = None


def generate_schedule(teams: List[str]) -> List[List[Fixture]]:
    """
    Generate a single round-robin schedule using the circle method.

    With an odd number of teams a bye placeholder is added and every pairing
    against it is dropped, so one team rests each round. For ``n`` participants
    (bye included) there are ``n - 1`` rounds. Fixture ids are
    ``r{round}-m{match}``, both 0-based.

    The pairing order depends on the order of ``teams``.
    """
    if len(teams) < 2:
        raise InvalidInput('At least two teams are required.')
    if len(set(teams)) != len(teams):
        raise InvalidInput('Team names must be unique.')

    participants = list(teams)
    if len(participants) % 2 == 1:
        participants.append(BYE)
    n = len(participants)

    rounds = []
    for round_index in range(n - 1):
        fixtures = []
        for i in range(n // 2):
            home = participants[i]
            away = participants[n - 1 - i]
            if home is BYE or away is BYE:
                continue
            fixtures.append(Fixture(f"r{round_index}-m{len(fixtures)}", home, away))
        rounds.append(fixtures)
        # Keep the first participant fixed and rotate the rest clockwise
        participants.insert(1, participants.pop())
    return rounds


def count_fixtures(schedule: List[List[Fixture]]) -> int:
    """Total number of fixtures across all rounds."""
    return sum(len(round_fixtures) for round_fixtures in schedule)


def iter_fixtures(schedule: List[List[Fixture]]):
    for round_fixtures in schedule:
        yield from round_fixtures
