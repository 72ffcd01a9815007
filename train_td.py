import logging

import hydra
from gymnasium.utils import seeding
from omegaconf import DictConfig, OmegaConf

from td2048.envs.game2x2 import Game2x2Env
from td2048.training import build_learner, evaluate, keypress_gate, train

logger = logging.getLogger(__name__)


@hydra.main(config_path="conf", config_name="train", version_base=None)
def main(cfg: DictConfig):
    print(OmegaConf.to_yaml(cfg))

    rng, seed = seeding.np_random(cfg.get("seed"))
    learner = build_learner(cfg)
    gate = keypress_gate() if bool(cfg.train.pause) else None

    stats = train(
        learner,
        episodes=int(cfg.train.episodes),
        rng=rng,
        gate=gate,
        log_interval=int(cfg.train.log_interval),
    )
    if stats:
        best = max(stats, key=lambda s: s.score)
        logger.info("Trained %d episodes | best score=%d (%s)", len(stats), best.score, best.final_board)

    eval_episodes = int(cfg.eval.episodes)
    if eval_episodes > 0:
        mean_return, lengths = evaluate(
            Game2x2Env(),
            learner.table,
            episodes=eval_episodes,
            seed=seed,
            max_steps=int(cfg.eval.max_steps),
        )
        logger.info("Greedy eval | mean_return=%.1f | mean_len=%.1f", mean_return, sum(lengths) / len(lengths))


if __name__ == "__main__":
    main()
