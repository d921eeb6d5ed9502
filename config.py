"""
Network and training tuning knobs.
"""

# Topology
LAYER_SIZES = [8, 2]  # first layer is all constant neurons, the rest weighted-sum
OUTPUT_SIZE = 2
DEFAULT_INPUT = 0.0

# Gradient descent
STEP_SIZE = 0.1
STEP_DECAY = 0.95  # applied after every minibatch
MINIBATCH_SIZE = 10
TRAINING_ITERATIONS = 25  # full train() passes run by the driver
TRAIN_SEED = 7

# Driver
PROBE_VALUES = (62, 63, 65)
TRAIN_EVERY_FRAMES = 20
LOG_LEVEL = "INFO"

# Environment
SCREEN_W, SCREEN_H = 980, 720
LAYER_MARGIN_X = 180
NEURON_RADIUS = 18
