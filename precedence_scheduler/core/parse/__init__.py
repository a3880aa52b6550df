"""Edge parser for precedence statements.

Turns lines like ``Step C must be finished before step A can begin.`` into
``Edge(blocker="C", blocked="A")``. The scheduler never sees raw text.
"""
