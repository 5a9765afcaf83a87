import logging
from dataclasses import replace

from .config import MAX_PROJECTILES
from .entities import Direction, GameStatus, Projectile
from .movement import next_position

logger = logging.getLogger(__name__)


def fire_projectile(snapshot, max_projectiles=MAX_PROJECTILES):
    """
    Launch a projectile from the player's cell along its facing direction.

    Returns the snapshot unchanged when the game is not running, there is no
    player, too many projectiles are already live or the player has never
    picked a heading.
    """
    player = snapshot.player
    if snapshot.status != GameStatus.PLAYING or player is None:
        return snapshot
    if len(snapshot.projectiles) >= max_projectiles:
        return snapshot

    direction = player.facing
    if direction == Direction.STOP:
        return snapshot

    projectile = Projectile(id=snapshot.next_projectile_id, position=player.position, direction=direction)
    logger.debug("Fired projectile %d %s from %s", projectile.id, direction.name, projectile.position)
    return replace(
        snapshot,
        projectiles=snapshot.projectiles + (projectile,),
        next_projectile_id=snapshot.next_projectile_id + 1,
    )


def advance_projectiles(projectiles, ghosts, grid, hit_score):
    """
    Move every projectile one cell and resolve hits.

    Returns (surviving projectiles, ghosts, score delta). A projectile that
    reaches a wall or a ghost is removed; a hit ghost goes back to its spawn.
    Only the first ghost in roster order on the cell is hit.
    """
    ghosts = list(ghosts)
    survivors = []
    score = 0

    for projectile in projectiles:
        position = next_position(projectile.position, projectile.direction, grid.width)
        if grid.is_wall(position):
            continue

        hit = False
        for i, ghost in enumerate(ghosts):
            if ghost.position == position:
                logger.debug("Projectile %d hit ghost %d at %s", projectile.id, ghost.id, position)
                ghosts[i] = ghost.respawned()
                score += hit_score
                hit = True
                break

        if not hit:
            survivors.append(replace(projectile, position=position))

    return survivors, ghosts, score
