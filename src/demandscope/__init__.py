from demandscope.eda import *
from demandscope.evaluation import *
from demandscope.plots import *
from demandscope.display import *
from demandscope.datasets import *
from demandscope.logging import *
from demandscope.app import *
