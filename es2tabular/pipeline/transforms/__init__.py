from es2tabular.pipeline.transforms.flattener import Flattenizer, es_to_table
from es2tabular.pipeline.transforms.hits import hits_to_table
from es2tabular.pipeline.transforms.walker import WalkContext, process_aggregation
