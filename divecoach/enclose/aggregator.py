_ORDER = ("critical", "high", "medium", "low")


def aggregate_priority(assessments):
    """
    Overall priority of an ENCLOSE result.

    Rules:
    - critical > high > medium > low
    - Empty list => evaluated, nothing found => "none"
    """

    overall = "none"

    for a in assessments:
        level = a.priority

        if level == "critical":
            return "critical"
        if level not in _ORDER:
            continue
        if overall == "none" or _ORDER.index(level) < _ORDER.index(overall):
            overall = level

    return overall
