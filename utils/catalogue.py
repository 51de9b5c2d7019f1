"""
Catalogue lookup: resolves requested modules and index numbers into the
ModuleOptions the generation engine works on.
"""

import logging
from typing import List, Dict, Any

from models import Module, ClassIndex
from utils.generation_types import ModuleOptions, GroupOption


logger = logging.getLogger(__name__)


def group_index_rows(rows: List[ClassIndex], module_name: str = '') -> List[GroupOption]:
    """Group session rows by index number, keeping first-seen order."""
    groups: Dict[str, GroupOption] = {}
    for row in rows:
        group = groups.get(row.index_number)
        if group is None:
            group = groups[row.index_number] = GroupOption(index_number=row.index_number)
        group.sessions.append(row.to_session(module_name))
    return list(groups.values())


def _ordered_index_query(module_code: str, semester: str):
    return ClassIndex.query.filter_by(module_code=module_code, semester=semester).order_by(
        ClassIndex.index_number, ClassIndex.type, ClassIndex.day, ClassIndex.start_time
    )


def fetch_modules_with_indexes(module_requests: List[Dict[str, Any]], semester: str) -> List[ModuleOptions]:
    """
    Load each requested module with the requested indexes.

    A module missing from the catalogue, or whose requested indexes have no
    sessions, is kept with no options, which makes the search come back empty.
    """
    modules: List[ModuleOptions] = []

    for request in module_requests:
        code = request['code'].upper()
        module = Module.query.filter_by(code=code, semester=semester).first()
        if not module:
            logger.warning("Module %s not found for semester %s", code, semester)
            modules.append(ModuleOptions(code=code, groups=[]))
            continue

        rows = _ordered_index_query(code, semester).filter(
            ClassIndex.index_number.in_(request['indexNumbers'])
        ).all()
        if not rows:
            logger.warning("No indexes found for module %s", code)

        modules.append(ModuleOptions(
            code=module.code,
            name=module.name,
            au=module.au,
            groups=group_index_rows(rows, module.name),
        ))

    return modules


def get_module_indexes(module_code: str, semester: str) -> List[GroupOption]:
    """All indexes of a module in a semester."""
    module = Module.query.filter_by(code=module_code.upper(), semester=semester).first()
    rows = _ordered_index_query(module_code.upper(), semester).all()
    return group_index_rows(rows, module.name if module else '')
