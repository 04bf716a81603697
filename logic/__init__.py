"""logic — Game systems package.

Modules
-------
tick            — per-frame orchestrator (the frame loop)
timers          — the single per-entity timer-advance step
input_manager   — raw pygame events → double-buffered controls
player          — player controller (momentum, attack, invulnerability)
enemy_ai        — wander / chase / stunned enemy behaviour
interactions    — pickup, combat and drop rules + end-of-frame purge
progression     — level objectives and the game-state machine
transition      — doorway walks into the neighbouring room
spawner         — entity factories and per-level population
effects         — particles / shake / flash feedback sink
particles       — particle simulation
audio           — named-sound sink with synthesized voices
camera          — smooth-follow camera
hud             — read-only HUD snapshot
"""
