from .skeleton_drawer import draw_results

__all__ = ['draw_results']
