"""
Every resource the website edits through the admin panel.

Text resources have no slots; file-backed resources name the subdirectory
of the upload root their files live in.
"""

from __future__ import annotations

from typing import Any

from assets.paths import format_file_size

from .resources import AssetSlot, Field, Resource


def _brochure_view(row: dict[str, Any]) -> dict[str, Any]:
    row["file_size"] = format_file_size(row.get("file_size"))
    return row


def _image(column: str = "image_url", *, name: str = "image", required: bool = False) -> AssetSlot:
    return AssetSlot(name, column=column, required=required)


RESOURCES: tuple[Resource, ...] = (
    # --- cars ---
    Resource(
        name="car-data",
        table="hyundai_car_data",
        label="Car",
        subdir="cars",
        fields=(
            Field("name", required=True),
            Field("body_style", alias="bodyStyle"),
            Field("transmission"),
            Field("fuel"),
            Field("manufacturing_year", "int", alias="manufacturingYear"),
            Field("mileage"),
            Field("engine_cc", alias="engineCc"),
            Field("seating"),
            Field("start_price", "number", alias="startPrice"),
            Field("end_price", "number", alias="endPrice"),
            Field("status", default="Enabled"),
        ),
        slots=(AssetSlot("feature_image"),),
        filters=("status", "fuel", "transmission"),
        search=("name", "body_style"),
    ),
    Resource(
        name="car-logos",
        table="car_logos",
        label="Car logo",
        subdir="car-logos",
        update_mode="merge",
        fields=(Field("name", required=True), Field("category")),
        slots=(AssetSlot("image", required=True),),
        filters=("category",),
    ),
    Resource(
        name="vehicles",
        table="vehicles_price",
        label="Vehicle",
        subdir="vehicles",
        fields=(
            Field("model", required=True),
            Field("fuel_type", required=True, alias="fuelType"),
            Field("transmission", required=True),
            Field("variant", required=True),
            Field("price", "number", required=True),
            Field("description"),
            Field("features", "list"),
            Field("status", default="Enabled"),
        ),
        slots=(AssetSlot("main_img"), AssetSlot("img1"), AssetSlot("img2"), AssetSlot("img3")),
        filters=("model", "fuel_type", "transmission", "status"),
        search=("model", "variant"),
    ),
    Resource(
        name="car-colors",
        table="car_colors",
        label="Car color",
        subdir="car-colors",
        fields=(
            Field("car_name", required=True, alias="carName"),
            Field("color_name", required=True, alias="colorName"),
            Field("color_id", required=True, alias="colorId"),
        ),
        slots=(AssetSlot("car_image", required=True),),
        filters=("car_name",),
    ),
    Resource(
        name="car-swatches",
        table="car_swatches",
        label="Car swatch",
        subdir="car-swatches",
        fields=(
            Field("car_name", required=True, alias="carName"),
            Field("swatch_name", required=True, alias="swatchName"),
            Field("swatch_id", required=True, alias="swatchId"),
            Field("color_code", required=True, alias="colorCode"),
        ),
        slots=(AssetSlot("swatch_image", required=True),),
        filters=("car_name",),
    ),
    Resource(
        name="car-ebrochure",
        table="car_ebrochures_all",
        label="Brochure",
        subdir="ebrochures",
        update_mode="merge",
        fields=(
            Field("car_name", required=True, alias="carName"),
            Field("slug"),
            Field("category", default="General"),
            Field("status", default="active"),
        ),
        slots=(
            AssetSlot(
                "brochure_file",
                column="file_url",
                kind="pdf",
                required=True,
                original_name_column="file_name",
                size_column="file_size",
            ),
            _image(),
        ),
        filters=("status", "category"),
        search=("car_name",),
        slug_column="slug",
        slug_source="car_name",
        decorate=_brochure_view,
    ),
    Resource(
        name="page-banner",
        table="car_banner_img",
        label="Banner",
        subdir="banners",
        fields=(Field("slug", required=True),),
        slots=(AssetSlot("car_image", required=True),),
        slug_column="slug",
    ),
    # --- car detail pages ---
    Resource(
        name="inside-about-us",
        table="highlight_about_us_section",
        label="About section",
        subdir="about-section",
        fields=(
            Field("section_title", alias="sectionTitle"),
            Field("heading"),
            Field("description"),
            Field("car_name", alias="carName"),
        ),
        slots=(_image(),),
        filters=("car_name",),
    ),
    Resource(
        name="highlight-tabs",
        table="car_highlight_tabs",
        label="Highlight tab",
        subdir="highlight-tabs",
        fields=(
            Field("label", required=True),
            Field("caption", required=True),
            Field("car_name", alias="carName"),
        ),
        slots=(_image(),),
        filters=("car_name",),
    ),
    Resource(
        name="highlight-gallery",
        table="car_highlight_gallery",
        label="Highlight image",
        subdir="highlight-gallery",
        fields=(Field("car_name", required=True, alias="carName"),),
        slots=(_image(required=True),),
        filters=("car_name",),
    ),
    Resource(
        name="car-int-gallery",
        table="car_int_gallery",
        label="Interior image",
        subdir="interior-gallery",
        fields=(
            Field("car_name", required=True, alias="carName"),
            Field("description", required=True),
        ),
        slots=(_image(required=True),),
        filters=("car_name",),
    ),
    Resource(
        name="car-ext-gallery",
        table="car_ext_gallery",
        label="Exterior image",
        subdir="exterior-gallery",
        fields=(
            Field("car_name", required=True, alias="carName"),
            Field("description", required=True),
        ),
        slots=(_image(required=True),),
        filters=("car_name",),
    ),
    Resource(
        name="exterior-views",
        table="car_exterior_views",
        label="Exterior view",
        subdir="exterior-views",
        fields=(
            Field("label", required=True),
            Field("caption", required=True),
            Field("car_name", required=True, alias="carName"),
        ),
        slots=(_image("img_url", required=True),),
        filters=("car_name",),
    ),
    Resource(
        name="car-performance-engine",
        table="car_performance",
        label="Performance entry",
        subdir="performance",
        fields=(
            Field("car_variant", required=True, alias="carVariant"),
            Field("tab_title", required=True, alias="tabTitle"),
            Field("short_description", required=True, alias="shortDescription"),
            Field("long_description", required=True, alias="longDescription"),
            Field("car_name", required=True, alias="carName"),
        ),
        slots=(_image(required=True),),
        filters=("car_name", "car_variant"),
    ),
    Resource(
        name="car-safety-security",
        table="car_safety_features",
        label="Safety feature",
        subdir="safety",
        fields=(
            Field("title", required=True),
            Field("description", required=True),
            Field("car_name", required=True, alias="carName"),
            Field("category"),
        ),
        slots=(AssetSlot("image", required=True),),
        filters=("car_name", "category"),
    ),
    Resource(
        name="car-convenience-feature",
        table="car_convenience_features",
        label="Convenience feature",
        subdir="convenience",
        fields=(
            Field("title", required=True),
            Field("content", required=True),
            Field("car_name", required=True, alias="carName"),
        ),
        slots=(AssetSlot("image", required=True),),
        filters=("car_name",),
    ),
    Resource(
        name="car-specifications",
        table="car_specifications",
        label="Specification",
        subdir="specifications",
        fields=(
            Field("title", required=True),
            Field("car_name", required=True, alias="carName"),
            Field("category"),
            Field("description"),
        ),
        slots=(AssetSlot("image"),),
        filters=("car_name", "category"),
    ),
    Resource(
        name="car-accessories",
        table="car_accessories",
        label="Accessory",
        subdir="accessories",
        fields=(
            Field("name", required=True),
            Field("model", required=True),
            Field("category", required=True),
            Field("price", "number"),
            Field("description"),
            Field("availability", default="In Stock"),
        ),
        slots=(AssetSlot("image"),),
        filters=("model", "category"),
        search=("name", "description"),
    ),
    Resource(
        name="car-service-offers",
        table="car_service",
        label="Service offer",
        subdir="service-offers",
        update_mode="merge",
        fields=(
            Field("thumbnail_heading", alias="thumbnailHeading"),
            Field("thumbnail_content", alias="thumbnailContent"),
            Field("price", "number"),
            Field("car_name", alias="carName"),
            Field("features", "list"),
        ),
        slots=(AssetSlot("card_image"), AssetSlot("thumbnail_image")),
        filters=("car_name",),
    ),
    # --- home page ---
    Resource(
        name="home-carousel",
        table="home_carousel",
        label="Carousel slide",
        subdir="home-carousel",
        fields=(Field("image_name", alias="imageName"),),
        slots=(_image(required=True),),
    ),
    Resource(
        name="home-services",
        table="home_services",
        label="Home service",
        subdir="home-services",
        fields=(Field("service_name", required=True, alias="serviceName"),),
        slots=(_image(),),
    ),
    Resource(
        name="home-tabs-service",
        table="home_tabs_services_section",
        label="Home tab",
        subdir="home-tabs",
        fields=(
            Field("main_heading", required=True, alias="mainHeading"),
            Field("main_content", required=True, alias="mainContent"),
            Field("tab_title", required=True, alias="tabTitle"),
            Field("points", "list", required=True),
        ),
        slots=(_image(),),
    ),
    Resource(
        name="home-about2",
        table="home_about2_section",
        label="Home about section",
        subdir="home-about",
        fields=(
            Field("main_heading", alias="mainHeading"),
            Field("description"),
        ),
        slots=(_image("image_url1", name="image1"), _image("image_url2", name="image2")),
    ),
    Resource(
        name="home-about-intro",
        table="home_about1_intro",
        label="Home about intro",
        fields=(Field("heading", required=True), Field("content", required=True)),
    ),
    Resource(
        name="home-about-highlights",
        table="home_about1_highlights",
        label="Home about highlight",
        order_by="sort_order ASC, id ASC",
        fields=(
            Field("title", required=True),
            Field("value", required=True),
            Field("description"),
            Field("sort_order", "int", default=0, alias="sortOrder"),
        ),
    ),
    Resource(
        name="testimonials",
        table="testimonials",
        label="Testimonial",
        subdir="testimonials",
        fields=(
            Field("person_name", required=True, alias="personName"),
            Field("message", required=True),
            Field("ratings", "int", required=True),
        ),
        slots=(AssetSlot("person_image"),),
    ),
    # --- pages ---
    Resource(
        name="about-us",
        table="about_us",
        label="About us",
        subdir="about-us",
        singleton=True,
        fields=(
            Field("company_name", alias="companyName"),
            Field("page_heading", alias="pageHeading"),
            Field("p1"),
            Field("p2"),
            Field("p3"),
            Field("p4"),
        ),
        slots=(AssetSlot("img1"), AssetSlot("img2")),
    ),
    Resource(
        name="gallery",
        table="gallery",
        label="Gallery",
        subdir="gallery",
        fields=(Field("slug", required=True), Field("title", required=True)),
        slots=(AssetSlot("images", column="image_array", multiple=True, max_count=10),),
        slug_column="slug",
    ),
    Resource(
        name="detailed-locations",
        table="detailed_locations",
        label="Location page",
        subdir="locations",
        fields=(
            Field("page_heading", alias="pageHeading"),
            Field("page_content", alias="pageContent"),
            Field("address"),
            Field("hours"),
            Field("contact"),
            Field("map_url", alias="mapUrl"),
            Field("facilities", "list"),
            Field("slug"),
            Field("type"),
        ),
        slots=(
            AssetSlot("main_image", subdir="locations/main"),
            AssetSlot("gallery_images", multiple=True, max_count=10, subdir="locations/gallery"),
        ),
        filters=("type",),
    ),
    Resource(
        name="services",
        table="all_services",
        label="Service",
        subdir="services",
        update_mode="merge",
        fields=(
            Field("slug", required=True),
            Field("main_heading", alias="mainHeading"),
            Field("main_content", alias="mainContent"),
            Field("product_content", alias="productContent"),
        ),
        slots=(AssetSlot("main_image"), AssetSlot("product_image")),
        slug_column="slug",
    ),
    Resource(
        name="faq",
        table="faq",
        label="FAQ",
        fields=(
            Field("category", required=True),
            Field("question", required=True),
            Field("answer", required=True),
        ),
        filters=("category",),
        search=("question", "answer"),
    ),
    Resource(
        name="documentation",
        table="documentation_page",
        label="Documentation entry",
        order_by="id ASC",
        fields=(
            Field("heading"),
            Field("item"),
            Field("page_heading", alias="pageHeading"),
            Field("page_paragraph", alias="pageParagraph"),
        ),
    ),
    Resource(
        name="metadata",
        table="meta_data",
        label="Page metadata",
        fields=(
            Field("slug", required=True),
            Field("title"),
            Field("description"),
            Field("keywords"),
        ),
        slug_column="slug",
    ),
    Resource(
        name="locations",
        table="location",
        label="Location",
        fields=(
            Field("name", required=True),
            Field("type"),
            Field("latitude", "number"),
            Field("longitude", "number"),
            Field("address"),
            Field("phone"),
            Field("hours"),
        ),
        filters=("type",),
    ),
    Resource(
        name="top-navbar",
        table="top_navbar",
        label="Navbar",
        fields=(Field("email"), Field("phone")),
    ),
    Resource(
        name="social-icons",
        table="social_icons",
        label="Social icon",
        order_by="id ASC",
        fields=(
            Field("platform", required=True),
            Field("icon_class", alias="iconClass"),
            Field("url", required=True),
        ),
    ),
    # --- enquiries ---
    Resource(
        name="contact-us",
        table="contact_us",
        label="Contact message",
        fields=(
            Field("name", required=True),
            Field("email", required=True),
            Field("message", required=True),
        ),
    ),
    Resource(
        name="book-service",
        table="service_bookings",
        label="Service booking",
        fields=(
            Field("first_name", required=True, alias="firstName"),
            Field("last_name", required=True, alias="lastName"),
            Field("email", required=True),
            Field("phone", required=True),
            Field("car_make", required=True, alias="carMake"),
            Field("car_model", required=True, alias="carModel"),
            Field("car_year", required=True, alias="carYear"),
            Field("license_plate", required=True, alias="licensePlate"),
            Field("service_type", required=True, alias="serviceType"),
            Field("preferred_date", required=True, alias="preferredDate"),
            Field("preferred_time", required=True, alias="preferredTime"),
            Field("additional_services", "list", alias="additionalServices"),
            Field("notes"),
            Field("terms_accepted", "bool", required=True, alias="termsAccepted"),
        ),
        search=("first_name", "last_name", "email", "license_plate"),
    ),
    Resource(
        name="test-drive",
        table="test_drive_bookings",
        label="Test drive booking",
        fields=(
            Field("salutation", required=True),
            Field("name", required=True),
            Field("email"),
            Field("mobile", required=True),
            Field("otp", required=True),
            Field("model", required=True),
            Field("state", required=True),
            Field("city", required=True),
            Field("dealer", required=True),
            Field("comments"),
        ),
        filters=("model",),
        search=("name", "mobile", "email"),
    ),
    Resource(
        name="pick-drop-service",
        table="pick_drop_services",
        label="Pick & drop request",
        paginated=True,
        fields=(
            Field("name", required=True),
            Field("mobile", required=True),
            Field("email", required=True),
            Field("service_type", required=True, alias="serviceType"),
            Field("car_model", required=True, alias="carModel"),
            Field("car_number", required=True, alias="carNumber"),
            Field("mileage", required=True),
            Field("service_date", required=True, alias="serviceDate"),
            Field("service_time", required=True, alias="serviceTime"),
            Field("description"),
            Field("service_center", required=True, alias="serviceCenter"),
            Field("pick_up", required=True, alias="pickUp", choices=("Yes", "No")),
            Field("terms_accepted", "bool", required=True, alias="termsAccepted"),
            Field("status", default="pending"),
        ),
        filters=("status",),
        search=("name", "mobile", "email", "car_number"),
    ),
    Resource(
        name="insurance-enquiries",
        table="insurance_enquiries",
        label="Insurance enquiry",
        fields=(
            Field("full_name", required=True, alias="fullName"),
            Field("mobile", required=True),
            Field("email", required=True),
            Field("vehicle_reg_no", required=True, alias="vehicleRegNo"),
            Field("current_insurance", required=True, alias="currentInsurance"),
            Field("terms_accepted", "bool", required=True, alias="termsAccepted"),
            Field("not_robot", "bool", required=True, alias="notRobot"),
        ),
    ),
    Resource(
        name="loan-enquiry",
        table="loan_enquiries",
        label="Loan enquiry",
        paginated=True,
        fields=(
            Field("selected_car", required=True, alias="selectedCar"),
            Field("car_variant", alias="carVariant"),
            Field("car_color", alias="carColor"),
            Field("loan_amount", "number", alias="loanAmount"),
            Field("loan_duration", alias="loanDuration"),
            Field("employment_type", alias="employmentType"),
            Field("annual_income", "number", alias="annualIncome"),
            Field("time_frame", alias="timeFrame"),
            Field("title"),
            Field("name", required=True),
            Field("email", required=True),
            Field("mobile", required=True),
            Field("pan_no", alias="panNo"),
            Field("address1"),
            Field("address2"),
            Field("city"),
            Field("area"),
            Field("pincode"),
            Field("status", default="pending"),
        ),
        filters=("status",),
        search=("name", "email", "mobile"),
    ),
    Resource(
        name="side-form-enquiry",
        table="side_form_enquiries",
        label="Enquiry",
        update_mode="merge",
        paginated=True,
        fields=(
            Field("name", required=True),
            Field("email", required=True),
            Field("contact_number", required=True, alias="contactNumber"),
            Field("enquiry_type", required=True, alias="enquiryType"),
            Field("model"),
            Field("location"),
            Field("agree_to_marketing", "bool", required=True, alias="agreeToMarketing"),
            Field("status", default="new"),
        ),
        filters=("status", "enquiry_type"),
        search=("name", "email", "contact_number"),
    ),
    Resource(
        name="accessory-enquiries",
        table="car_accessory_enquiries",
        label="Accessory enquiry",
        paginated=True,
        fields=(
            Field("product_id", "int", alias="productId"),
            Field("customer_name", required=True, alias="customerName"),
            Field("email", required=True),
            Field("phone", required=True),
            Field("address"),
            Field("city", required=True),
            Field("pincode"),
            Field("message"),
            Field("status", default="pending"),
        ),
        filters=("status",),
        search=("customer_name", "email", "phone"),
    ),
    Resource(
        name="roadside-assistance",
        table="roadside_requests",
        label="Roadside assistance request",
        fields=(
            Field("name", required=True),
            Field("email", required=True),
            Field("mobile", required=True),
            Field("model", required=True),
            Field("service_center", required=True, alias="serviceCenter"),
            Field("comments"),
            Field("agree", "bool", default=False),
        ),
    ),
)

BY_NAME: dict[str, Resource] = {r.name: r for r in RESOURCES}


def get(name: str) -> Resource:
    return BY_NAME[name]


def upload_subdirs() -> set[str]:
    subdirs: set[str] = set()
    for resource in RESOURCES:
        subdirs.update(resource.subdirs)
    return subdirs
