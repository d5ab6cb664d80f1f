"""
Danger detection: zones whose final strain exceeds the material limit.

The simulation core never looks at max_strain; this check runs on a
finished TensionResult so that display layers can flag overstretched
spans.
"""


def find_dangerous_zones(result, max_strain):
    """
    List zones whose last strain sample is strictly above max_strain.

    Parameters
    ----------
    result : TensionResult
    max_strain : float or None
        Danger threshold. None disables the check.

    Returns
    -------
    list of dict
        {"index": 1-based zone number, "zone_id", "span", "strain"} in
        line order.
    """
    if max_strain is None:
        return []

    dangerous = []
    for zone in result.zones:
        history = result.strain_series.get(zone.id)
        if not history:
            continue
        eps_final = history[-1]
        if eps_final > max_strain:
            dangerous.append({
                "index": zone.global_index + 1,
                "zone_id": zone.id,
                "span": zone.span,
                "strain": eps_final,
            })
    return dangerous
