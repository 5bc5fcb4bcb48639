from .basket_service import BasketService
from .conversion_service import ConversionService
from .index_service import AvgxIndexService
from .reconciler import Reconciler

__all__ = ['AvgxIndexService', 'BasketService', 'ConversionService', 'Reconciler']
