from jsonbatch.query.condition import Condition
from jsonbatch.query.insert import Insert, Upsert
from jsonbatch.query.select import Delete, Select

__all__ = ['Condition', 'Delete', 'Insert', 'Select', 'Upsert']
