# img2mc/block_lists.py
from __future__ import annotations

"""
Built-in block tables.

Each entry is 'texture|block_id' or 'texture|block_id|key=value,key=value'.
The texture is looked up as <textures>/<texture>.png in an extracted
assets/minecraft/textures/block folder.

Exports:
  NORMAL_BLOCKS          full cubes placed as-is
  STAIR_BLOCKS           full-cube textures also offered as the four stair silhouettes
  SLAB_BLOCKS            full-cube textures also offered as top and bottom slabs
  ROTATE_4_WAY_BLOCKS    textures offered in four facings (rotated tile)
  NON_SURVIVAL_BLOCKS    texture names unobtainable in survival mode
"""

from typing import List

_COLOURS = [
    "white",
    "orange",
    "magenta",
    "light_blue",
    "yellow",
    "lime",
    "pink",
    "gray",
    "light_gray",
    "cyan",
    "purple",
    "blue",
    "brown",
    "green",
    "red",
    "black",
]

_WOODS = [
    "oak",
    "spruce",
    "birch",
    "jungle",
    "acacia",
    "dark_oak",
    "mangrove",
    "cherry",
    "bamboo",
    "crimson",
    "warped",
]

NORMAL_BLOCKS: List[str] = (
    [
        "stone|minecraft:stone",
        "granite|minecraft:granite",
        "polished_granite|minecraft:polished_granite",
        "diorite|minecraft:diorite",
        "polished_diorite|minecraft:polished_diorite",
        "andesite|minecraft:andesite",
        "polished_andesite|minecraft:polished_andesite",
        "cobblestone|minecraft:cobblestone",
        "mossy_cobblestone|minecraft:mossy_cobblestone",
        "stone_bricks|minecraft:stone_bricks",
        "mossy_stone_bricks|minecraft:mossy_stone_bricks",
        "cracked_stone_bricks|minecraft:cracked_stone_bricks",
        "smooth_stone|minecraft:smooth_stone",
        "bricks|minecraft:bricks",
        "dirt|minecraft:dirt",
        "coarse_dirt|minecraft:coarse_dirt",
        "clay|minecraft:clay",
        "sand|minecraft:sand",
        "red_sand|minecraft:red_sand",
        "gravel|minecraft:gravel",
        "sandstone_top|minecraft:sandstone",
        "red_sandstone_top|minecraft:red_sandstone",
        "deepslate_bricks|minecraft:deepslate_bricks",
        "deepslate_tiles|minecraft:deepslate_tiles",
        "polished_deepslate|minecraft:polished_deepslate",
        "cobbled_deepslate|minecraft:cobbled_deepslate",
        "tuff|minecraft:tuff",
        "calcite|minecraft:calcite",
        "blackstone|minecraft:blackstone",
        "polished_blackstone|minecraft:polished_blackstone",
        "polished_blackstone_bricks|minecraft:polished_blackstone_bricks",
        "netherrack|minecraft:netherrack",
        "nether_bricks|minecraft:nether_bricks",
        "red_nether_bricks|minecraft:red_nether_bricks",
        "end_stone|minecraft:end_stone",
        "end_stone_bricks|minecraft:end_stone_bricks",
        "purpur_block|minecraft:purpur_block",
        "prismarine|minecraft:prismarine",
        "prismarine_bricks|minecraft:prismarine_bricks",
        "dark_prismarine|minecraft:dark_prismarine",
        "quartz_block_side|minecraft:quartz_block",
        "snow|minecraft:snow_block",
        "packed_ice|minecraft:packed_ice",
        "blue_ice|minecraft:blue_ice",
        "obsidian|minecraft:obsidian",
        "crying_obsidian|minecraft:crying_obsidian",
        "glowstone|minecraft:glowstone",
        "sea_lantern|minecraft:sea_lantern",
        "shroomlight|minecraft:shroomlight",
        "honeycomb_block|minecraft:honeycomb_block",
        "slime_block|minecraft:slime_block",
        "amethyst_block|minecraft:amethyst_block",
        "budding_amethyst|minecraft:budding_amethyst",
        "copper_block|minecraft:copper_block",
        "exposed_copper|minecraft:exposed_copper",
        "weathered_copper|minecraft:weathered_copper",
        "oxidized_copper|minecraft:oxidized_copper",
        "iron_block|minecraft:iron_block",
        "gold_block|minecraft:gold_block",
        "diamond_block|minecraft:diamond_block",
        "emerald_block|minecraft:emerald_block",
        "lapis_block|minecraft:lapis_block",
        "redstone_block|minecraft:redstone_block",
        "coal_block|minecraft:coal_block",
        "netherite_block|minecraft:netherite_block",
        "bedrock|minecraft:bedrock",
        "reinforced_deepslate_side|minecraft:reinforced_deepslate",
        "mud_bricks|minecraft:mud_bricks",
        "packed_mud|minecraft:packed_mud",
        "moss_block|minecraft:moss_block",
        "dried_kelp_side|minecraft:dried_kelp_block",
        "terracotta|minecraft:terracotta",
    ]
    + [f"{c}_wool|minecraft:{c}_wool" for c in _COLOURS]
    + [f"{c}_concrete|minecraft:{c}_concrete" for c in _COLOURS]
    + [f"{c}_concrete_powder|minecraft:{c}_concrete_powder" for c in _COLOURS]
    + [f"{c}_terracotta|minecraft:{c}_terracotta" for c in _COLOURS]
    + [f"{w}_planks|minecraft:{w}_planks" for w in _WOODS]
)

STAIR_BLOCKS: List[str] = [
    "stone|minecraft:stone_stairs",
    "granite|minecraft:granite_stairs",
    "diorite|minecraft:diorite_stairs",
    "andesite|minecraft:andesite_stairs",
    "cobblestone|minecraft:cobblestone_stairs",
    "mossy_cobblestone|minecraft:mossy_cobblestone_stairs",
    "stone_bricks|minecraft:stone_brick_stairs",
    "bricks|minecraft:brick_stairs",
    "sandstone_top|minecraft:sandstone_stairs",
    "red_sandstone_top|minecraft:red_sandstone_stairs",
    "nether_bricks|minecraft:nether_brick_stairs",
    "end_stone_bricks|minecraft:end_stone_brick_stairs",
    "purpur_block|minecraft:purpur_stairs",
    "prismarine|minecraft:prismarine_stairs",
    "quartz_block_side|minecraft:quartz_stairs",
    "blackstone|minecraft:blackstone_stairs",
    "deepslate_bricks|minecraft:deepslate_brick_stairs",
    "mud_bricks|minecraft:mud_brick_stairs",
] + [f"{w}_planks|minecraft:{w}_stairs" for w in _WOODS]

SLAB_BLOCKS: List[str] = [
    "stone|minecraft:stone_slab",
    "smooth_stone|minecraft:smooth_stone_slab",
    "granite|minecraft:granite_slab",
    "diorite|minecraft:diorite_slab",
    "andesite|minecraft:andesite_slab",
    "cobblestone|minecraft:cobblestone_slab",
    "stone_bricks|minecraft:stone_brick_slab",
    "bricks|minecraft:brick_slab",
    "sandstone_top|minecraft:sandstone_slab",
    "red_sandstone_top|minecraft:red_sandstone_slab",
    "nether_bricks|minecraft:nether_brick_slab",
    "end_stone_bricks|minecraft:end_stone_brick_slab",
    "purpur_block|minecraft:purpur_slab",
    "prismarine|minecraft:prismarine_slab",
    "quartz_block_side|minecraft:quartz_slab",
    "blackstone|minecraft:blackstone_slab",
    "deepslate_tiles|minecraft:deepslate_tile_slab",
    "mud_bricks|minecraft:mud_brick_slab",
] + [f"{w}_planks|minecraft:{w}_slab" for w in _WOODS]

ROTATE_4_WAY_BLOCKS: List[str] = [
    f"{c}_glazed_terracotta|minecraft:{c}_glazed_terracotta" for c in _COLOURS
] + [
    "furnace_front|minecraft:furnace",
    "smoker_front|minecraft:smoker",
    "blast_furnace_front|minecraft:blast_furnace",
    "carved_pumpkin|minecraft:carved_pumpkin",
    "jack_o_lantern|minecraft:jack_o_lantern",
    "loom_front|minecraft:loom",
]

NON_SURVIVAL_BLOCKS: List[str] = [
    "bedrock",
    "budding_amethyst",
    "reinforced_deepslate_side",
    "command_block_front",
    "chain_command_block_front",
    "repeating_command_block_front",
    "structure_block",
    "jigsaw_top",
    "barrier",
    "spawner",
    "end_portal_frame_side",
    "petrified_oak_slab",
    "infested_stone",
    "farmland",
    "dirt_path_side",
]

__all__ = [
    "NORMAL_BLOCKS",
    "STAIR_BLOCKS",
    "SLAB_BLOCKS",
    "ROTATE_4_WAY_BLOCKS",
    "NON_SURVIVAL_BLOCKS",
]
