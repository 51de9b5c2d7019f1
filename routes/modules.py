from flask import Blueprint, jsonify, request
from models import db, Module
from utils.catalogue import get_module_indexes

modules_bp = Blueprint('modules', __name__)


@modules_bp.route('/search')
def search_modules():
    """Search modules by code or name."""
    query = request.args.get('q', '').strip()
    semester = request.args.get('semester', '').strip()

    if not query:
        return jsonify({'modules': []})

    modules = Module.query.filter(
        db.or_(
            Module.code.ilike(f'%{query}%'),
            Module.name.ilike(f'%{query}%')
        )
    )
    if semester:
        modules = modules.filter_by(semester=semester)
    modules = modules.order_by(Module.code, Module.semester.desc()).limit(20).all()

    return jsonify({
        'modules': [module.to_dict() for module in modules]
    })


@modules_bp.route('/semesters')
def get_semesters():
    """List semesters that have modules, newest first."""
    rows = db.session.query(Module.semester).distinct().order_by(Module.semester.desc()).all()
    return jsonify({'semesters': [row[0] for row in rows]})


@modules_bp.route('/<code>')
def get_module(code):
    """Get the most recent offering of a module."""
    module = Module.query.filter_by(code=code.upper()).order_by(Module.semester.desc()).first()
    if not module:
        return jsonify({'error': f'Module {code.upper()} not found'}), 404
    return jsonify(module.to_dict())


@modules_bp.route('/<code>/indexes')
def get_indexes(code):
    """Get all indexes of a module, grouped by index number."""
    semester = request.args.get('semester', '').strip()
    if not semester:
        module = Module.query.filter_by(code=code.upper()).order_by(Module.semester.desc()).first()
        if not module:
            return jsonify({'error': f'Module {code.upper()} not found'}), 404
        semester = module.semester

    groups = get_module_indexes(code, semester)
    if not groups:
        return jsonify({'error': f'No indexes found for module {code.upper()} in semester {semester}'}), 404

    return jsonify({
        'moduleCode': code.upper(),
        'semester': semester,
        'indexes': [
            {
                'indexNumber': group.index_number,
                'classes': [session.to_dict() for session in group.sessions]
            } for group in groups
        ]
    })
