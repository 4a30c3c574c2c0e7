from engine.episodes.assembler import assemble_episode, primary_by_count

__all__ = ["assemble_episode", "primary_by_count"]
