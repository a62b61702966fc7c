from .booth_analysis import CompareBoothsRequest

__all__ = ['CompareBoothsRequest']
