"""Static metabolite reference tables backing the mocked pathway lookup."""

from typing import Dict

GENE_LOCUS_MAP: Dict[str, str] = {
    "Glucose": "GLK1",
    "Fructose": "PFK1",
    "Pyruvate": "PDC1",
    "Citrate": "CIT1",
    "Malate": "MDH1",
    "Lactate": "LDH1",
    "Succinate": "SDH1",
    "Fumarate": "FUM1",
    "Alpha-Ketoglutarate": "KGD1",
    "Oxaloacetate": "OAA1",
    "Alanine": "ALT1",
    "Glutamate": "GDH1",
    "Aspartate": "ASP1",
    "Glycine": "GLY1",
    "Serine": "SER1",
}

# metabolite -> (pathway, reaction steps)
PATHWAY_MAP: Dict[str, Dict[str, object]] = {
    "Glucose": {"pathway": "Glycolysis", "reactions": ["Glucose → Glucose-6P", "Glucose-6P → Fructose-6P"]},
    "Fructose": {"pathway": "Glycolysis", "reactions": ["Fructose → Fructose-6P", "Fructose-6P → Fructose-1,6BP"]},
    "Pyruvate": {"pathway": "TCA Cycle", "reactions": ["Pyruvate → Acetyl-CoA", "Acetyl-CoA + Oxaloacetate → Citrate"]},
    "Citrate": {"pathway": "TCA Cycle", "reactions": ["Citrate → Isocitrate", "Isocitrate → α-Ketoglutarate"]},
    "Malate": {"pathway": "TCA Cycle", "reactions": ["Malate → Oxaloacetate", "Oxaloacetate + Acetyl-CoA → Citrate"]},
    "Lactate": {"pathway": "Fermentation", "reactions": ["Pyruvate → Lactate"]},
    "Succinate": {"pathway": "TCA Cycle", "reactions": ["Succinate → Fumarate", "Fumarate → Malate"]},
    "Fumarate": {"pathway": "TCA Cycle", "reactions": ["Fumarate → Malate", "Malate → Oxaloacetate"]},
    "Alpha-Ketoglutarate": {"pathway": "TCA Cycle", "reactions": ["α-Ketoglutarate → Succinyl-CoA", "Succinyl-CoA → Succinate"]},
    "Oxaloacetate": {"pathway": "TCA Cycle", "reactions": ["Oxaloacetate + Acetyl-CoA → Citrate"]},
    "Alanine": {"pathway": "Amino Acid Metabolism", "reactions": ["Pyruvate + Glutamate ↔ Alanine + α-Ketoglutarate"]},
    "Glutamate": {"pathway": "Amino Acid Metabolism", "reactions": ["α-Ketoglutarate + NH4+ ↔ Glutamate"]},
    "Aspartate": {"pathway": "Amino Acid Metabolism", "reactions": ["Oxaloacetate + Glutamate ↔ Aspartate + α-Ketoglutarate"]},
    "Glycine": {"pathway": "Amino Acid Metabolism", "reactions": ["Serine → Glycine + CH2=THF"]},
    "Serine": {"pathway": "Amino Acid Metabolism", "reactions": ["3-Phosphoglycerate → 3-Phosphoserine → Serine"]},
}
