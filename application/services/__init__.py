from .conversion_service import ConversionService
from .rate_merger import RateMerger
from .rate_resolver import RateResolver
from .rate_service import RateService

__all__ = ['ConversionService', 'RateMerger', 'RateResolver', 'RateService']
