from flask import Blueprint, current_app, jsonify, request

from domain.packages.schemas import PackageSnapshot
from fitcoach.schemas.package import packages_schema
from fitcoach.services.access import entitlement_resolver, request_now
from fitcoach.services.stores import PackageCatalog, PurchaseLedger
from fitcoach.utils.decorators import role_required

packages_bp = Blueprint('packages', __name__)


@packages_bp.route("", methods=["GET"])
def list_packages():
    return jsonify({"packages": packages_schema.dump(PackageCatalog().list_active())}), 200


@packages_bp.route("/purchase", methods=["POST"])
@role_required("client")
def purchase_package(current_user):
    body = request.get_json(silent=True) or {}
    catalog = PackageCatalog()

    package = None
    if body.get("packageId") is not None:
        try:
            package = catalog.get(int(body["packageId"]))
        except (TypeError, ValueError):
            return jsonify({"msg": "packageId must be an integer"}), 400
    elif body.get("slug"):
        package = catalog.get_by_slug(str(body["slug"]))
    else:
        return jsonify({"msg": "packageId or slug is required"}), 400

    if package is None or not package.is_active:
        return jsonify({"msg": "Package not found"}), 404

    now = request_now()
    purchase = PurchaseLedger().record_purchase(
        current_user.id, package, now, payment_reference=body.get("paymentReference")
    )
    current_app.logger.info(
        "package_purchased user_id=%s package=%s purchase_id=%s",
        current_user.id, package.slug, purchase.id,
    )

    entitlement = entitlement_resolver().resolve_or_none(current_user.id, now)
    return jsonify({
        "msg": "Package purchased",
        "package": PackageSnapshot.model_validate(package).to_json(),
        "activePackage": entitlement.to_json() if entitlement else None,
    }), 201
