import logging

logger = logging.getLogger(__name__)


def resolve_player_contact(player_pos, ghosts, capture_score):
    """
    Check the roster against the player's cell for this tick.

    Frightened ghosts on the cell are captured and sent home. The first
    non-frightened ghost on the cell ends the game; the scan stops there.

    Returns (ghosts, score delta, lost).
    """
    ghosts = list(ghosts)
    score = 0

    for i, ghost in enumerate(ghosts):
        if ghost.position != player_pos:
            continue
        if not ghost.frightened:
            logger.debug("Ghost %d caught the player at %s", ghost.id, player_pos)
            return ghosts, score, True
        logger.debug("Player captured ghost %d at %s", ghost.id, player_pos)
        ghosts[i] = ghost.respawned()
        score += capture_score

    return ghosts, score, False
