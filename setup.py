from setuptools import find_packages, setup
import os
from glob import glob

package_name = 'ball_sorter'

setup(
    name=package_name,
    version='1.0.0',
    packages=find_packages(exclude=['test']),
    data_files=[
        ('share/ament_index/resource_index/packages',
            ['resource/' + package_name]),
        ('share/' + package_name, ['package.xml']),
        # Launch 파일 포함
        (os.path.join('share', package_name, 'launch'), glob('launch/*.py')),
        # Config 파일 포함
        (os.path.join('share', package_name, 'config'), glob('config/*')),
    ],
    install_requires=['setuptools', 'PyYAML'],
    zip_safe=True,
    maintainer='taesla',
    maintainer_email='taesla@todo.todo',
    description='Color-based ball sorting controller (ROS2 node + state machine)',
    license='Apache-2.0',
    extras_require={
        'test': [
            'pytest',
        ],
    },
    entry_points={
        'console_scripts': [
            'sort_node = ball_sorter.nodes.sort_node:main',
        ],
    },
)
