# ------------------------------------------------------------------
# Material library. Moduli and strengths in MPa, thickness in mm,
# density in g/cm3, expansion coefficients in 1/degC, thermal
# resistance (maximum service temperature) in degC.
# ------------------------------------------------------------------
from laminates.clt.data_utils import (
    ElasticProperties,
    MaterialProperties,
    StrengthProperties,
    ThermalProperties,
    material_registry,
)

fiberglass_ec9_136 = MaterialProperties(
    name="Fiberglass EC9-136",
    material_type="Glass Fiber",
    t=0.25,
    rho=1.9,
    elastic_properties=ElasticProperties(E1=72000, E2=72000, G12=3000, v12=0.22),
    strength_properties=StrengthProperties(tensile=3450, compressive=1450, shear=45),
    thermal_properties=ThermalProperties(thermal_resistance=260),
    color="#E8F4F8",
)
carbon_fiber_twill = MaterialProperties(
    name="Carbon Fiber Twill",
    material_type="Carbon Fiber",
    t=0.25,
    rho=1.9,
    elastic_properties=ElasticProperties(E1=57000, E2=57000, G12=4500, v12=0.20),
    strength_properties=StrengthProperties(tensile=740, compressive=531, shear=61),
    thermal_properties=ThermalProperties(thermal_resistance=650),
    color="#2C2C2C",
)
aramid_kevlar_twill = MaterialProperties(
    name="Aramid Kevlar Twill",
    material_type="Aramid Fiber",
    t=0.20,
    rho=1.45,
    elastic_properties=ElasticProperties(E1=118000, E2=118000, G12=3000, v12=0.34),
    strength_properties=StrengthProperties(tensile=1970, compressive=400, shear=50),
    thermal_properties=ThermalProperties(thermal_resistance=260),
    color="#FFE5B4",
)
# Unidirectional tapes
Christos = MaterialProperties(
    name="Christos",
    material_type="Carbon Fiber UD",
    t=0.2,
    rho=1.61,
    elastic_properties=ElasticProperties(E1=142000, E2=11200, G12=5000, v12=0.3),
    strength_properties=StrengthProperties(tensile=2200, compressive=1800, shear=100),
    thermal_properties=ThermalProperties(alpha1=-0.5e-6, alpha2=30e-6),
)
T700 = MaterialProperties(
    name="T700",
    material_type="Carbon Fiber UD",
    t=0.12,
    rho=1.61,
    elastic_properties=ElasticProperties(E1=135000, E2=11200, G12=5000, v12=0.3),
    strength_properties=StrengthProperties(tensile=2550, compressive=1470, shear=100),
    thermal_properties=ThermalProperties(alpha1=-0.4e-6, alpha2=28e-6),
)

DEFAULT_MATERIALS = material_registry(fiberglass_ec9_136, carbon_fiber_twill, aramid_kevlar_twill)
MATERIAL_LIBRARY = material_registry(*DEFAULT_MATERIALS.values(), Christos, T700)
DEFAULT_MATERIAL = carbon_fiber_twill
