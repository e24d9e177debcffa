"""
Data models for a league-plus-cup tournament.

Every model converts to and from the plain dict layout stored on disk and
sent over the API (camelCase keys, e.g. ``homeScore``).
"""


class Fixture:
    def __init__(self, id, home, away):
        self.id = id
        self.home = home
        self.away = away

    def to_dict(self):
        return {'id': self.id, 'home': self.home, 'away': self.away}

    @classmethod
    def from_dict(cls, data):
        return cls(data['id'], data['home'], data['away'])

    def __repr__(self):
        return f"Fixture(id={self.id}, home={self.home}, away={self.away})"


class MatchResult:
    def __init__(self, id, home, away, home_score, away_score):
        self.id = id
        self.home = home
        self.away = away
        self.home_score = home_score
        self.away_score = away_score

    def to_dict(self):
        return {
            'id': self.id,
            'home': self.home,
            'away': self.away,
            'homeScore': self.home_score,
            'awayScore': self.away_score,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(data['id'], data['home'], data['away'],
                   data['homeScore'], data['awayScore'])

    def __repr__(self):
        return (f"MatchResult(id={self.id}, {self.home} {self.home_score}"
                f"-{self.away_score} {self.away})")


class TeamRecord:
    """Aggregate group-stage record of one team. Always derived from results."""

    def __init__(self, logo=None):
        self.played = 0
        self.wins = 0
        self.draws = 0
        self.losses = 0
        self.goals_for = 0
        self.goals_against = 0
        self.goal_difference = 0
        self.points = 0
        self.logo = logo

    def to_dict(self):
        return {
            'played': self.played,
            'wins': self.wins,
            'draws': self.draws,
            'losses': self.losses,
            'goalsFor': self.goals_for,
            'goalsAgainst': self.goals_against,
            'goalDifference': self.goal_difference,
            'points': self.points,
            'logo': self.logo,
        }

    @classmethod
    def from_dict(cls, data):
        record = cls(logo=data.get('logo'))
        record.played = data.get('played', 0)
        record.wins = data.get('wins', 0)
        record.draws = data.get('draws', 0)
        record.losses = data.get('losses', 0)
        record.goals_for = data.get('goalsFor', 0)
        record.goals_against = data.get('goalsAgainst', 0)
        record.goal_difference = data.get('goalDifference', 0)
        record.points = data.get('points', 0)
        return record

    def __repr__(self):
        return (f"TeamRecord(played={self.played}, W{self.wins} D{self.draws} "
                f"L{self.losses}, GD={self.goal_difference}, points={self.points})")


class KnockoutMatch:
    def __init__(self, id, home=None, away=None, home_score=None, away_score=None, winner=None):
        self.id = id
        self.home = home
        self.away = away
        self.home_score = home_score
        self.away_score = away_score
        self.winner = winner

    def to_dict(self):
        return {
            'id': self.id,
            'home': self.home,
            'away': self.away,
            'homeScore': self.home_score,
            'awayScore': self.away_score,
            'winner': self.winner,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(data['id'], data.get('home'), data.get('away'),
                   data.get('homeScore'), data.get('awayScore'), data.get('winner'))

    def __repr__(self):
        return f"KnockoutMatch(id={self.id}, home={self.home}, away={self.away}, winner={self.winner})"


class Bracket:
    def __init__(self, semi_finals, final):
        self.semi_finals = semi_finals
        self.final = final

    def to_dict(self):
        return {
            'semiFinals': [sf.to_dict() for sf in self.semi_finals],
            'final': self.final.to_dict(),
        }

    @classmethod
    def from_dict(cls, data):
        return cls([KnockoutMatch.from_dict(sf) for sf in data['semiFinals']],
                   KnockoutMatch.from_dict(data['final']))

    def __repr__(self):
        return f"Bracket(semi_finals={self.semi_finals}, final={self.final})"


class TournamentSummary:
    """Registry entry used for listing tournaments."""

    def __init__(self, id, name, created_at):
        self.id = id
        self.name = name
        self.created_at = created_at

    def to_dict(self):
        return {'id': self.id, 'name': self.name, 'createdAt': self.created_at}

    @classmethod
    def from_dict(cls, data):
        return cls(data['id'], data['name'], data.get('createdAt'))

    def __repr__(self):
        return f"TournamentSummary(id={self.id}, name={self.name})"


class TournamentState:
    """Everything persisted for one tournament, saved and loaded as one document."""

    def __init__(self, id, name, created_at, teams, schedule,
                 scoreboard=None, results=None, knockout=None):
        self.id = id
        self.name = name
        self.created_at = created_at
        self.teams = teams
        self.schedule = schedule
        self.scoreboard = scoreboard if scoreboard is not None else {}
        self.results = results if results is not None else []
        self.knockout = knockout

    def summary(self):
        return TournamentSummary(self.id, self.name, self.created_at)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'createdAt': self.created_at,
            'teams': list(self.teams),
            'schedule': [[fixture.to_dict() for fixture in round_fixtures]
                         for round_fixtures in self.schedule],
            'scoreboard': {team: record.to_dict() for team, record in self.scoreboard.items()},
            'results': [result.to_dict() for result in self.results],
            'knockout': self.knockout.to_dict() if self.knockout else None,
        }

    @classmethod
    def from_dict(cls, data):
        knockout = data.get('knockout')
        return cls(
            id=data['id'],
            name=data['name'],
            created_at=data.get('createdAt'),
            teams=list(data.get('teams') or []),
            schedule=[[Fixture.from_dict(f) for f in round_fixtures]
                      for round_fixtures in data.get('schedule') or []],
            scoreboard={team: TeamRecord.from_dict(record)
                        for team, record in (data.get('scoreboard') or {}).items()},
            results=[MatchResult.from_dict(r) for r in data.get('results') or []],
            knockout=Bracket.from_dict(knockout) if knockout else None,
        )

    def __repr__(self):
        return f"TournamentState(id={self.id}, name={self.name}, teams={len(self.teams)})"
