import logging
from dataclasses import replace

from .entities import PowerUpState

logger = logging.getLogger(__name__)


def consume(player_pos, pellets, power_pellets, power_up, ghosts, level):
    """
    Eat whatever is on the player's cell and run the power-up clock.

    Eating a power pellet restarts the power-up and frightens every ghost;
    otherwise an active power-up ticks down and, once it runs out, calms
    every ghost again.

    Returns (pellets, power_pellets, power_up, ghosts, score delta).
    """
    score = 0
    ghosts = list(ghosts)

    if player_pos in pellets:
        pellets = pellets - {player_pos}
        score += level.scoring.pellet

    if player_pos in power_pellets:
        power_pellets = power_pellets - {player_pos}
        score += level.scoring.power_pellet
        power_up = PowerUpState(active=True, timer=level.power_up_ticks)
        ghosts = [replace(g, frightened=True) for g in ghosts]
        logger.debug("Power-up on for %d ticks", power_up.timer)
    elif power_up.active:
        timer = power_up.timer - 1
        if timer <= 0:
            power_up = PowerUpState()
            ghosts = [replace(g, frightened=False) for g in ghosts]
            logger.debug("Power-up expired")
        else:
            power_up = PowerUpState(active=True, timer=timer)

    return pellets, power_pellets, power_up, ghosts, score
